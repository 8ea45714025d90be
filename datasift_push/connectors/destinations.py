"""Connectors for every push destination kind.

Each output type has exactly one connector class, registered in
``CONNECTOR_TYPES``. ``connector_for`` builds a connector from a plain
mapping, e.g. one read from a configuration file.
"""

from typing import Any, Dict, Mapping, Optional, Type, Union

from loguru import logger

from datasift_push.connectors.base import BaseConnector
from datasift_push.core.constants import OutputType


class _NetworkConnector(BaseConnector):
    """Destinations reached through a host, a port and optional credentials."""

    def host(self, host: str):
        return self.set_param("host", host)

    def port(self, port: int):
        return self.set_param("port", port)

    def username(self, username: str):
        return self.set_param("auth.username", username)

    def password(self, password: str):
        return self.set_param("auth.password", password)


class _BatchDeliveryMixin:
    """Destinations receiving data in periodic batches."""

    def delivery_frequency(self, seconds: int):
        return self.set_param("delivery_frequency", seconds)

    def max_size(self, size: int):
        return self.set_param("max_size", size)

    def format(self, output_format: str):
        return self.set_param("format", output_format)


class _AwsCredentialsMixin:
    def access_key(self, key: str):
        return self.set_param("auth.access_key", key)

    def secret_key(self, key: str):
        return self.set_param("auth.secret_key", key)


class BigQueryConnector(BaseConnector):
    """Google BigQuery table."""

    output_type = OutputType.BIG_QUERY
    required_params = (
        "dataset",
        "table",
        "auth.project_id",
        "auth.client_id",
        "auth.service_account",
        "auth.key_file",
    )

    def dataset(self, dataset: str):
        return self.set_param("dataset", dataset)

    def table(self, table: str):
        return self.set_param("table", table)

    def project_id(self, project_id: str):
        return self.set_param("auth.project_id", project_id)

    def client_id(self, client_id: str):
        return self.set_param("auth.client_id", client_id)

    def service_account(self, account: str):
        return self.set_param("auth.service_account", account)

    def key_file(self, key_file: str):
        return self.set_param("auth.key_file", key_file)


class CouchDbConnector(_NetworkConnector):
    output_type = OutputType.COUCH_DB
    required_params = ("host", "db_name")

    def db_name(self, name: str):
        return self.set_param("db_name", name)

    def use_ssl(self, enabled: bool):
        return self.set_param("use_ssl", enabled)

    def verify_ssl(self, enabled: bool):
        return self.set_param("verify_ssl", enabled)


class DynamoDbConnector(_AwsCredentialsMixin, BaseConnector):
    output_type = OutputType.DYNAMO_DB
    required_params = ("table", "region", "auth.access_key", "auth.secret_key")

    def table(self, table: str):
        return self.set_param("table", table)

    def region(self, region: str):
        return self.set_param("region", region)


class ElasticSearchConnector(_NetworkConnector):
    output_type = OutputType.ELASTIC_SEARCH
    required_params = ("host", "port", "index", "type")

    def index(self, index: str):
        return self.set_param("index", index)

    def type(self, doc_type: str):
        return self.set_param("type", doc_type)


class FtpConnector(_BatchDeliveryMixin, _NetworkConnector):
    output_type = OutputType.FTP
    required_params = ("host", "port", "directory", "auth.username", "auth.password")

    def directory(self, directory: str):
        return self.set_param("directory", directory)

    def file_prefix(self, prefix: str):
        return self.set_param("file_prefix", prefix)


class HttpConnector(_BatchDeliveryMixin, BaseConnector):
    """Plain HTTP(S) endpoint receiving POSTed batches."""

    output_type = OutputType.HTTP
    required_params = ("url",)

    def url(self, url: str):
        return self.set_param("url", url)

    def verify_ssl(self, enabled: bool):
        return self.set_param("verify_ssl", enabled)

    def use_gzip(self, enabled: bool):
        return self.set_param("use_gzip", enabled)

    def auth_type(self, auth_type: str):
        return self.set_param("auth.type", auth_type)

    def username(self, username: str):
        return self.set_param("auth.username", username)

    def password(self, password: str):
        return self.set_param("auth.password", password)


class MongoDbConnector(_NetworkConnector):
    output_type = OutputType.MONGO_DB
    required_params = ("host", "port", "database", "collection")

    def database(self, database: str):
        return self.set_param("database", database)

    def collection(self, collection: str):
        return self.set_param("collection", collection)


class PrecogConnector(BaseConnector):
    output_type = OutputType.PRECOG
    required_params = ("url", "path", "auth.apikey")

    def url(self, url: str):
        return self.set_param("url", url)

    def path(self, path: str):
        return self.set_param("path", path)

    def api_key(self, key: str):
        return self.set_param("auth.apikey", key)


class RedisConnector(_NetworkConnector):
    output_type = OutputType.REDIS
    required_params = ("host", "port", "database", "list")

    def database(self, database: int):
        return self.set_param("database", database)

    def list(self, name: str):
        return self.set_param("list", name)


class S3Connector(_AwsCredentialsMixin, _BatchDeliveryMixin, BaseConnector):
    """Amazon S3 bucket."""

    output_type = OutputType.S3
    required_params = ("bucket", "directory", "acl", "auth.access_key", "auth.secret_key")

    def bucket(self, bucket: str):
        return self.set_param("bucket", bucket)

    def directory(self, directory: str):
        return self.set_param("directory", directory)

    def acl(self, acl: str):
        return self.set_param("acl", acl)

    def file_prefix(self, prefix: str):
        return self.set_param("file_prefix", prefix)


class SftpConnector(_BatchDeliveryMixin, _NetworkConnector):
    output_type = OutputType.SFTP
    required_params = ("host", "port", "directory", "auth.username", "auth.password")

    def directory(self, directory: str):
        return self.set_param("directory", directory)

    def file_prefix(self, prefix: str):
        return self.set_param("file_prefix", prefix)


class SplunkConnector(_NetworkConnector):
    """Splunk Enterprise receiver."""

    output_type = OutputType.SPLUNK_ENTERPRISE
    required_params = ("host", "port", "auth.username", "auth.password")


class SplunkStormConnector(_NetworkConnector):
    output_type = OutputType.SPLUNK_STORM
    required_params = ("host", "port")


class SplunkStormRestConnector(BaseConnector):
    output_type = OutputType.SPLUNK_STORM_REST
    required_params = ("api_hostname", "project_id", "auth.access_token")

    def api_hostname(self, hostname: str):
        return self.set_param("api_hostname", hostname)

    def project_id(self, project_id: str):
        return self.set_param("project_id", project_id)

    def access_token(self, token: str):
        return self.set_param("auth.access_token", token)


class ZoomDataConnector(_NetworkConnector):
    output_type = OutputType.ZOOM_DATA
    required_params = ("host", "port", "source", "auth.username", "auth.password")

    def source(self, source: str):
        return self.set_param("source", source)


CONNECTOR_TYPES: Dict[OutputType, Type[BaseConnector]] = {
    OutputType.BIG_QUERY: BigQueryConnector,
    OutputType.COUCH_DB: CouchDbConnector,
    OutputType.DYNAMO_DB: DynamoDbConnector,
    OutputType.ELASTIC_SEARCH: ElasticSearchConnector,
    OutputType.FTP: FtpConnector,
    OutputType.HTTP: HttpConnector,
    OutputType.MONGO_DB: MongoDbConnector,
    OutputType.PRECOG: PrecogConnector,
    OutputType.REDIS: RedisConnector,
    OutputType.S3: S3Connector,
    OutputType.SFTP: SftpConnector,
    OutputType.SPLUNK_ENTERPRISE: SplunkConnector,
    OutputType.SPLUNK_STORM: SplunkStormConnector,
    OutputType.SPLUNK_STORM_REST: SplunkStormRestConnector,
    OutputType.ZOOM_DATA: ZoomDataConnector,
}


def connector_for(
    output_type: Union[OutputType, str],
    params: Optional[Mapping[str, Any]] = None,
) -> BaseConnector:
    """Build the connector of ``output_type`` populated from ``params``.

    Args:
        output_type: Destination kind, as an ``OutputType`` or its name
        params: Unprefixed parameters; entries set to None are skipped

    Returns:
        A new connector of the matching class

    Raises:
        InvalidDataError: If the output type is unknown
    """
    kind = OutputType.parse(output_type)
    connector_class = CONNECTOR_TYPES[kind]
    logger.debug(f"Building {connector_class.__name__} for output type {kind.value}")
    return connector_class().put_all(params)


def bigquery() -> BigQueryConnector:
    return BigQueryConnector()


def couchdb() -> CouchDbConnector:
    return CouchDbConnector()


def dynamodb() -> DynamoDbConnector:
    return DynamoDbConnector()


def elasticsearch() -> ElasticSearchConnector:
    return ElasticSearchConnector()


def ftp() -> FtpConnector:
    return FtpConnector()


def http() -> HttpConnector:
    return HttpConnector()


def mongodb() -> MongoDbConnector:
    return MongoDbConnector()


def precog() -> PrecogConnector:
    return PrecogConnector()


def redis() -> RedisConnector:
    return RedisConnector()


def s3() -> S3Connector:
    return S3Connector()


def sftp() -> SftpConnector:
    return SftpConnector()


def splunk() -> SplunkConnector:
    return SplunkConnector()


def splunk_storm() -> SplunkStormConnector:
    return SplunkStormConnector()


def splunk_storm_rest() -> SplunkStormRestConnector:
    return SplunkStormRestConnector()


def zoomdata() -> ZoomDataConnector:
    return ZoomDataConnector()
