"""Configuration management for the push client.

Configuration precedence (highest to lowest):
explicit overrides > environment variables > YAML file > defaults
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Dict, Any, Optional

import yaml
from loguru import logger

from datasift_push.core.exceptions import ConfigurationError
from datasift_push.core.constants import (
    DEFAULT_PAGE_SIZE,
    LIST_ALL_PAGE_SIZE,
    ENV_CONFIG_FILE,
    ENV_PAGE_SIZE,
    ENV_LIST_ALL_PAGE_SIZE,
    ENV_LOG_LEVEL,
)

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class PushConfig:
    """Client-wide settings."""

    default_page_size: int = DEFAULT_PAGE_SIZE
    list_all_page_size: int = LIST_ALL_PAGE_SIZE
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration after initialization."""
        for name in ("default_page_size", "list_all_page_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigurationError(
                    f"{name} must be a positive integer",
                    details={name: value},
                )
        self.log_level = str(self.log_level).upper()
        if self.log_level not in _LOG_LEVELS:
            raise ConfigurationError(
                f"Unknown log level: {self.log_level}",
                details={"available": sorted(_LOG_LEVELS)},
            )


class ConfigurationManager:
    """Loads ``PushConfig`` from a YAML file and the environment."""

    ENV_VARS = {
        "default_page_size": ENV_PAGE_SIZE,
        "list_all_page_size": ENV_LIST_ALL_PAGE_SIZE,
        "log_level": ENV_LOG_LEVEL,
    }

    def __init__(self, config_file: Optional[Path] = None):
        """Initialize the configuration manager.

        Args:
            config_file: YAML file to read. Defaults to the path named by
                         ``DATASIFT_PUSH_CONFIG``, if any.
        """
        if config_file is None and os.getenv(ENV_CONFIG_FILE):
            config_file = Path(os.environ[ENV_CONFIG_FILE])
        self.config_file = Path(config_file) if config_file else None

    def load_config(self, **overrides: Any) -> PushConfig:
        """Build the configuration from every source.

        Args:
            **overrides: Field values taking precedence over everything else

        Returns:
            PushConfig instance

        Raises:
            ConfigurationError: If a source holds invalid values
        """
        values: Dict[str, Any] = {}
        values.update(self._load_yaml())
        values.update(self._load_env())
        values.update({k: v for k, v in overrides.items() if v is not None})

        known = {f.name for f in fields(PushConfig)}
        unknown = set(values) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(sorted(unknown))}"
            )

        config = PushConfig(**values)
        logger.debug(f"Loaded push configuration: {config}")
        return config

    def _load_yaml(self) -> Dict[str, Any]:
        """Read the YAML file, if one is configured.

        Returns:
            Mapping of configuration keys from the file's ``push`` section
            (or its top level)
        """
        if self.config_file is None:
            return {}
        if not self.config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_file}")

        with open(self.config_file, "r") as ymlfile:
            data = yaml.safe_load(ymlfile) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {self.config_file}"
            )
        section = data.get("push", data)
        if not isinstance(section, dict):
            raise ConfigurationError("The 'push' section must be a mapping")
        return dict(section)

    def _load_env(self) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for key, env_var in self.ENV_VARS.items():
            raw = os.getenv(env_var)
            if raw is None or raw == "":
                continue
            if key == "log_level":
                values[key] = raw
                continue
            try:
                values[key] = int(raw)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid integer value: {raw}",
                    details={"env_var": env_var},
                )
        return values


_config: Optional[PushConfig] = None


def get_config() -> PushConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = ConfigurationManager().load_config()
    return _config


def set_config(config: Optional[PushConfig] = None, **changes: Any) -> PushConfig:
    """Replace the process-wide configuration.

    Args:
        config: New configuration; ``None`` reloads from the sources
        **changes: Field values applied on top of ``config``

    Returns:
        The configuration now in effect
    """
    global _config
    if config is None:
        config = ConfigurationManager().load_config()
    if changes:
        config = replace(config, **changes)
    _config = config
    return _config


def reset_config() -> None:
    """Forget the loaded configuration so the next access reloads it."""
    global _config
    _config = None
