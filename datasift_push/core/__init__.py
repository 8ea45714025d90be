"""Core abstractions and interfaces for the push client."""

from datasift_push.core.protocols import APISession
from datasift_push.core.exceptions import (
    PushError,
    InvalidDataError,
    APIError,
    AccessDeniedError,
    ConfigurationError,
)
from datasift_push.core.config import (
    PushConfig,
    ConfigurationManager,
    get_config,
    set_config,
    reset_config,
)

__all__ = [
    # Protocols
    "APISession",
    # Exceptions
    "PushError",
    "InvalidDataError",
    "APIError",
    "AccessDeniedError",
    "ConfigurationError",
    # Configuration
    "PushConfig",
    "ConfigurationManager",
    "get_config",
    "set_config",
    "reset_config",
]
