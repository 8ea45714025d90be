"""
Client for the push subscription API.
Creates, lists, updates and deletes subscriptions streaming filtered
social data to HTTP endpoints, object stores, databases and log
aggregators.
"""

from dotenv import load_dotenv
from loguru import logger

# Load .env file if it exists (important for local development)
load_dotenv()

from datasift_push.core import (  # noqa: E402
    APISession,
    PushError,
    InvalidDataError,
    APIError,
    AccessDeniedError,
    ConfigurationError,
    PushConfig,
    get_config,
    set_config,
)
from datasift_push.core.constants import (  # noqa: E402
    HashType,
    OrderBy,
    OrderDirection,
    OutputType,
    SubscriptionStatus,
)
from datasift_push.domain import PushSubscription, HttpSubscription  # noqa: E402
from datasift_push import connectors  # noqa: E402
from datasift_push.utils.logging import PACKAGE, disable_logging, setup_logging  # noqa: E402

__version__ = "0.1.0"

# Silent unless the application calls setup_logging()
logger.disable(PACKAGE)

__all__ = [
    "APISession",
    "PushError",
    "InvalidDataError",
    "APIError",
    "AccessDeniedError",
    "ConfigurationError",
    "PushConfig",
    "get_config",
    "set_config",
    "HashType",
    "OrderBy",
    "OrderDirection",
    "OutputType",
    "SubscriptionStatus",
    "PushSubscription",
    "HttpSubscription",
    "connectors",
    "setup_logging",
    "disable_logging",
]
