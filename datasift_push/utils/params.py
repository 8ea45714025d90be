"""Helpers for shaping request parameters."""

import copy
import json
from typing import Any, Dict, Mapping, MutableMapping

from datasift_push.core.constants import SENSITIVE_KEYS


def to_param_value(value: Any) -> str:
    """Render a value the way the API expects it in a form parameter."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def get_path(data: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Look up ``path`` in nested output params.

    An exact key wins over a dotted path, so a stored key such as
    ``X.Trace`` is still reachable; otherwise ``auth.username`` walks
    into ``data["auth"]["username"]``.
    """
    if path in data:
        return data[path]
    node: Any = data
    for part in path.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return default
        node = node[part]
    return node


def set_path(data: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Set a dotted ``path``, creating or replacing intermediate objects."""
    if path in data:
        data[path] = value
        return
    parts = path.split(".")
    node = data
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, MutableMapping):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value


def pop_path(data: MutableMapping[str, Any], path: str) -> Any:
    """Remove a dotted ``path``; missing paths are ignored."""
    if path in data:
        return data.pop(path)
    parts = path.split(".")
    node: Any = data
    for part in parts[:-1]:
        node = node.get(part) if isinstance(node, MutableMapping) else None
    if isinstance(node, MutableMapping):
        return node.pop(parts[-1], None)
    return None


def copy_output_params(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Deep, owned copy of output params as received from the API."""
    return copy.deepcopy(dict(data))


def encode_output_params(params: Mapping[str, Any]) -> str:
    """JSON-encode output params for the ``output_params`` request key."""
    return json.dumps(params, sort_keys=True)


def sanitize_log_data(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Remove sensitive data from logs.

    Args:
        data: Data to sanitize

    Returns:
        Sanitized copy of data
    """
    sanitized = {}

    for key, value in data.items():
        # The encoded output_params blob may embed credentials
        if key == "output_params" or any(sk in key.lower() for sk in SENSITIVE_KEYS):
            sanitized[key] = "***REDACTED***"
        else:
            sanitized[key] = value

    return sanitized
