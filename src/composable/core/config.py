"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings

from .enums import LogFormat


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class CompositionConfig(BaseModel):
    # Callables held in a receiver's own attributes may satisfy dependencies
    receiver_capabilities: bool = True


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.CONSOLE


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level settings.

    Loaded from TOML config files, overridden by environment variables
    (``COMPOSABLE_OBSERVABILITY__LOG_LEVEL=DEBUG``).
    """

    composition: CompositionConfig = Field(default_factory=CompositionConfig)
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig
    )

    model_config = {"env_prefix": "COMPOSABLE_", "env_nested_delimiter": "__"}


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional). A path that does
            not exist is ignored.
        overrides: Dict of overrides to apply on top, merged one level deep
            into the sub-config sections.

    Raises:
        ConfigError: If the file is not valid TOML or a value fails
            validation.
    """
    from .errors import ConfigError

    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            try:
                with open(path, "rb") as f:
                    data = tomli.load(f)
            except tomli.TOMLDecodeError as exc:
                raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    for key, value in (overrides or {}).items():
        if isinstance(value, dict) and isinstance(data.get(key), dict):
            data[key] = {**data[key], **value}
        else:
            data[key] = value

    try:
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
