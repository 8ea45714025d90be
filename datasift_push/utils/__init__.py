"""Utility helpers for the push client."""

from datasift_push.utils.logging import setup_logging, disable_logging, redact_secrets
from datasift_push.utils.params import (
    get_path,
    set_path,
    pop_path,
    copy_output_params,
    encode_output_params,
    sanitize_log_data,
    to_param_value,
)

__all__ = [
    "setup_logging",
    "disable_logging",
    "redact_secrets",
    "get_path",
    "set_path",
    "pop_path",
    "copy_output_params",
    "encode_output_params",
    "sanitize_log_data",
    "to_param_value",
]
