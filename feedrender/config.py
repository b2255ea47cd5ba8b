"""Configuration management for the feed renderer."""

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from .logging_config import create_execution_logger


class ConfigError(ValueError):
    """Raised when feed configuration values cannot be used."""


# Read-only; every FeedConfig is merged from a copy of this table.
DEFAULTS: Mapping[str, Any] = MappingProxyType(
    {
        "title": "",
        "url": "",
        "description": "",
        "xsl_stylesheet_url": "",
        "css_stylesheet_url": "",
        "copyright": "",
        "ttl": 0,
        "item_title_field": "title",
        "item_description_field": "description",
        "item_date_field": "published",
        "item_description_max_length": 0,
    }
)

_INT_FIELDS = {"ttl", "item_description_max_length"}


def _coerce_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"Invalid value for {key}: expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ConfigError(f"Invalid value for {key}: expected an integer, got {value!r}")


def _require_mapping(overrides: Any) -> Mapping[str, Any]:
    if overrides is None:
        return {}
    if not isinstance(overrides, Mapping):
        raise ConfigError(
            f"Configuration overrides must be a mapping, got {type(overrides).__name__}"
        )
    return overrides


@dataclass(frozen=True)
class FeedConfig:
    """Feed-level metadata and per-item field mappings."""

    title: str = DEFAULTS["title"]
    url: str = DEFAULTS["url"]
    description: str = DEFAULTS["description"]
    xsl_stylesheet_url: str = DEFAULTS["xsl_stylesheet_url"]
    css_stylesheet_url: str = DEFAULTS["css_stylesheet_url"]
    copyright: str = DEFAULTS["copyright"]
    ttl: int = DEFAULTS["ttl"]
    item_title_field: str = DEFAULTS["item_title_field"]
    item_description_field: str = DEFAULTS["item_description_field"]
    item_date_field: str = DEFAULTS["item_date_field"]
    item_description_max_length: int = DEFAULTS["item_description_max_length"]

    @classmethod
    def merge(
        cls, overrides: Mapping[str, Any] | None = None, execution_id: str | None = None
    ) -> "FeedConfig":
        """Build a FeedConfig from the default table and caller overrides.

        Keys missing from overrides, or set to None, take their default.
        Integer fields are coerced from strings; negative values are kept.

        Args:
            overrides: Partial key-value record
            execution_id: Execution ID for logging context

        Returns:
            A new FeedConfig with every field set

        Raises:
            ConfigError: If overrides is not a mapping or an integer field
                cannot be coerced
        """
        overrides = _require_mapping(overrides)
        logger = create_execution_logger("config", execution_id)

        unknown = sorted(set(overrides) - set(DEFAULTS))
        if unknown:
            logger.warning(
                f"Ignoring unknown configuration keys: {', '.join(unknown)}",
                unknown_keys=unknown,
            )

        values = dict(DEFAULTS)
        for key in DEFAULTS:
            value = overrides.get(key)
            if value is None:
                continue
            if key in _INT_FIELDS:
                values[key] = _coerce_int(key, value)
            else:
                values[key] = str(value)

        return cls(**values)

    def as_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class Config:
    """Loads feed configuration overrides from a JSON file and the environment."""

    # Default config file path
    CONFIG_FILE = "feed.json"
    ENV_PREFIX = "FEED_"

    def __init__(self, execution_id: str | None = None):
        """Initialize configuration from environment variables."""
        self.execution_id = execution_id
        self.logger = create_execution_logger("config", execution_id)
        self.config_file = os.getenv("FEED_CONFIG_FILE", self.CONFIG_FILE)
        self.fallback_url = os.getenv("FEED_FALLBACK_URL", "")

    def load_file_overrides(self) -> dict[str, Any]:
        """Read overrides from the JSON config file, if there is one."""
        config_file = Path(self.config_file)
        if not config_file.exists() and not config_file.is_absolute():
            # Try in Lambda root directory
            config_file = Path("/var/task") / self.config_file

        if not config_file.exists():
            self.logger.debug(
                "No config file found", config_file=str(self.config_file)
            )
            return {}

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file {config_file}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Error reading config file {config_file}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_file} must contain a JSON object")

        self.logger.info("Loaded config file", config_file=str(config_file))
        return data

    def load_env_overrides(self) -> dict[str, Any]:
        """Read FEED_<KEY> environment variables, e.g. FEED_TITLE or FEED_TTL."""
        overrides = {}
        for key in DEFAULTS:
            value = os.getenv(f"{self.ENV_PREFIX}{key.upper()}")
            if value is not None:
                overrides[key] = value
        return overrides

    def get_feed_config(self, overrides: Mapping[str, Any] | None = None) -> FeedConfig:
        """Merge file, environment and call-site overrides into a FeedConfig.

        Call-site overrides win over the environment, which wins over the file.
        """
        merged = self.load_file_overrides()
        merged.update(self.load_env_overrides())
        merged.update(_require_mapping(overrides))
        return FeedConfig.merge(merged, execution_id=self.execution_id)
