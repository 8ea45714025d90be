"""Destination connectors and their registry."""

from datasift_push.connectors.base import BaseConnector, PreparedParams
from datasift_push.connectors.destinations import (
    CONNECTOR_TYPES,
    connector_for,
    BigQueryConnector,
    CouchDbConnector,
    DynamoDbConnector,
    ElasticSearchConnector,
    FtpConnector,
    HttpConnector,
    MongoDbConnector,
    PrecogConnector,
    RedisConnector,
    S3Connector,
    SftpConnector,
    SplunkConnector,
    SplunkStormConnector,
    SplunkStormRestConnector,
    ZoomDataConnector,
    bigquery,
    couchdb,
    dynamodb,
    elasticsearch,
    ftp,
    http,
    mongodb,
    precog,
    redis,
    s3,
    sftp,
    splunk,
    splunk_storm,
    splunk_storm_rest,
    zoomdata,
)

__all__ = [
    "BaseConnector",
    "PreparedParams",
    "CONNECTOR_TYPES",
    "connector_for",
    "BigQueryConnector",
    "CouchDbConnector",
    "DynamoDbConnector",
    "ElasticSearchConnector",
    "FtpConnector",
    "HttpConnector",
    "MongoDbConnector",
    "PrecogConnector",
    "RedisConnector",
    "S3Connector",
    "SftpConnector",
    "SplunkConnector",
    "SplunkStormConnector",
    "SplunkStormRestConnector",
    "ZoomDataConnector",
    "bigquery",
    "couchdb",
    "dynamodb",
    "elasticsearch",
    "ftp",
    "http",
    "mongodb",
    "precog",
    "redis",
    "s3",
    "sftp",
    "splunk",
    "splunk_storm",
    "splunk_storm_rest",
    "zoomdata",
]
