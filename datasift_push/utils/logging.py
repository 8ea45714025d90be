"""
Logging for the push client.

The package logs through loguru but stays silent until the application
opts in: ``datasift_push/__init__.py`` disables the package's records and
``setup_logging`` enables them again, adding sinks that only receive
records from this package, with credentials masked.
"""

import re
import sys
from typing import Any, Dict, List, Optional

from loguru import logger

PACKAGE = "datasift_push"

DEFAULT_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | push | {name}:{function}:{line} - {message}"
)

# key=value, key: value and 'key': 'value' pairs naming a credential
_SECRET_PATTERN = re.compile(
    r"""(?P<key>['"]?[\w.]*(?:password|secret|token|api_?key|access_key)[\w.]*['"]?\s*[:=]\s*)"""
    r"""(?P<value>'[^']*'|"[^"]*"|[^\s,}]+)""",
    re.IGNORECASE,
)

_handler_ids: List[int] = []


def redact_secrets(message: str) -> str:
    """Mask the values of credential-looking pairs in a log message."""
    return _SECRET_PATTERN.sub(
        lambda match: f"{match.group('key')}'***REDACTED***'"
        if match.group("value") != "'***REDACTED***'"
        else match.group(0),
        message,
    )


def _package_filter(record: Dict[str, Any]) -> bool:
    name = record["name"] or ""
    if name != PACKAGE and not name.startswith(PACKAGE + "."):
        return False
    record["message"] = redact_secrets(record["message"])
    return True


def setup_logging(
    level: Optional[str] = None,
    format: str = DEFAULT_FORMAT,
    log_file: Optional[str] = None,
) -> None:
    """
    Enable the package's log records and route them to stderr.

    Sinks added by an earlier call are replaced; sinks the application
    registered itself are left alone.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to the
               configured ``log_level``.
        format: Log message format
        log_file: Optional file path to write logs
    """
    if level is None:
        from datasift_push.core.config import get_config

        level = get_config().log_level

    disable_logging()
    logger.enable(PACKAGE)

    _handler_ids.append(
        logger.add(sys.stderr, format=format, level=level, filter=_package_filter, colorize=True)
    )

    if log_file:
        _handler_ids.append(
            logger.add(
                log_file,
                format=format,
                level=level,
                filter=_package_filter,
                rotation="10 MB",
                retention="7 days",
            )
        )


def disable_logging() -> None:
    """Remove the sinks added by ``setup_logging`` and silence the package."""
    while _handler_ids:
        logger.remove(_handler_ids.pop())
    logger.disable(PACKAGE)
