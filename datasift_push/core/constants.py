"""Constants and enumerations for the push subscription client.

This module centralizes endpoint names, request keys and the enumerated
values accepted by the push API.
"""

from enum import Enum
from typing import Final


# Endpoints
ENDPOINT_GET: Final[str] = "push/get"
ENDPOINT_CREATE: Final[str] = "push/create"
ENDPOINT_UPDATE: Final[str] = "push/update"
ENDPOINT_DELETE: Final[str] = "push/delete"

# Connector parameters are namespaced under this prefix on the wire
OUTPUT_PARAMS_PREFIX: Final[str] = "output_params."

# Paging defaults
DEFAULT_PAGE_SIZE: Final[int] = 20
LIST_ALL_PAGE_SIZE: Final[int] = 100

# Environment variables
ENV_CONFIG_FILE: Final[str] = "DATASIFT_PUSH_CONFIG"
ENV_PAGE_SIZE: Final[str] = "DATASIFT_PUSH_PAGE_SIZE"
ENV_LIST_ALL_PAGE_SIZE: Final[str] = "DATASIFT_PUSH_LIST_ALL_PAGE_SIZE"
ENV_LOG_LEVEL: Final[str] = "DATASIFT_PUSH_LOG_LEVEL"

# Substrings marking request parameters that must not be logged
SENSITIVE_KEYS: Final[frozenset] = frozenset({"password", "secret", "key", "token"})


class HashType(Enum):
    """Source a subscription attaches to."""

    STREAM = "stream"
    HISTORIC = "historic"


class SubscriptionStatus(Enum):
    """Lifecycle states reported by the push API."""

    ACTIVE = "active"
    PAUSED = "paused"
    STOPPED = "stopped"
    FINISHING = "finishing"
    FINISHED = "finished"
    DELETED = "deleted"


# Statuses a new subscription may be created in
INITIAL_STATUSES: Final[frozenset] = frozenset({
    SubscriptionStatus.ACTIVE.value,
    SubscriptionStatus.PAUSED.value,
    SubscriptionStatus.STOPPED.value,
})


class OrderBy(Enum):
    """Fields a subscription listing can be ordered on."""

    ID = "id"
    CREATED_AT = "created_at"


class OrderDirection(Enum):
    """Ordering direction for subscription listings."""

    ASC = "asc"
    DESC = "desc"


class OutputType(Enum):
    """Destination kinds supported by the push API."""

    BIG_QUERY = "bigquery"
    COUCH_DB = "couchdb"
    DYNAMO_DB = "dynamodb"
    ELASTIC_SEARCH = "elasticsearch"
    FTP = "ftp"
    HTTP = "http"
    MONGO_DB = "mongodb"
    PRECOG = "precog"
    REDIS = "redis"
    S3 = "s3"
    SFTP = "sftp"
    SPLUNK_ENTERPRISE = "splunk"
    SPLUNK_STORM = "splunkstorm"
    SPLUNK_STORM_REST = "splunkstormrest"
    ZOOM_DATA = "zoomdata"

    @classmethod
    def parse(cls, value) -> "OutputType":
        """Resolve an output type from its name, ignoring case.

        Args:
            value: An ``OutputType`` or its string value

        Returns:
            The matching ``OutputType``

        Raises:
            InvalidDataError: If the value names no known output type
        """
        # Imported here, exceptions has no dependency on constants
        from datasift_push.core.exceptions import InvalidDataError

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        raise InvalidDataError(
            f'Unknown output type "{value}"',
            field="output_type",
            details={"available": [member.value for member in cls]},
        )
