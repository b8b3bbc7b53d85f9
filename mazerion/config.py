"""
Runtime settings and logging setup.

Settings come from, in increasing priority: built-in defaults, a TOML file
(argument or ``MAZERION_CONFIG``) and ``MAZERION_*`` environment variables.

Example file::

    log_level = "INFO"
    port = 8080
    cors_origins = ["http://localhost:3000"]

    [limits]
    max_batch_size = 20
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from mazerion.core.errors import ConfigError

logger = logging.getLogger(__name__)

ENV_CONFIG_PATH = "MAZERION_CONFIG"

# Environment variable -> settings key
ENV_OVERRIDES: dict[str, str] = {
    "MAZERION_LOG_LEVEL": "log_level",
    "MAZERION_HOST": "host",
    "MAZERION_PORT": "port",
    "MAZERION_CORS_ORIGINS": "cors_origins",
}

ENV_LIMIT_OVERRIDES: dict[str, str] = {
    "MAZERION_MAX_PARAMS": "max_params",
    "MAZERION_MAX_BATCH_SIZE": "max_batch_size",
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Limits(BaseModel):
    """Size limits applied to every request before a calculator runs."""
    max_id_length: int = Field(default=100, gt=0)
    max_params: int = Field(default=50, gt=0)
    max_key_length: int = Field(default=100, gt=0)
    max_value_length: int = Field(default=1000, gt=0)
    max_batch_size: int = Field(default=100, gt=0)


class Settings(BaseModel):
    """Application settings shared by the API, CLI and engine."""
    app_name: str = "Mazerion"
    log_level: str = Field(default="WARNING", description="Root log level name")
    host: str = "127.0.0.1"
    port: int = Field(default=8000, gt=0, lt=65536)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    limits: Limits = Field(default_factory=Limits)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v: Any) -> Any:
        """Allow a comma-separated string, as set from the environment."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e


def _apply_env(data: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    merged = dict(data)
    for env_var, key in ENV_OVERRIDES.items():
        raw = environ.get(env_var, "").strip()
        if raw:
            merged[key] = raw

    limits = dict(merged.get("limits") or {})
    for env_var, key in ENV_LIMIT_OVERRIDES.items():
        raw = environ.get(env_var, "").strip()
        if raw:
            limits[key] = raw
    if limits:
        merged["limits"] = limits
    return merged


def load_settings(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Build Settings from an optional TOML file and the environment.

    Args:
        path: TOML file; defaults to ``$MAZERION_CONFIG`` when set
        environ: Environment mapping, ``os.environ`` by default

    Raises:
        ConfigError: If the file is missing or malformed, or a value is invalid
    """
    if environ is None:
        environ = os.environ
    if path is None:
        path = environ.get(ENV_CONFIG_PATH) or None

    data: dict[str, Any] = {}
    if path is not None:
        data = _read_toml(Path(path))
        logger.debug("Loaded settings from %s", path)

    try:
        return Settings.model_validate(_apply_env(data, environ))
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e


def configure_logging(level: Union[str, int] = "WARNING") -> None:
    """Send log records to stderr at ``level``."""
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
