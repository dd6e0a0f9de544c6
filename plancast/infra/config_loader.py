from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from plancast.infra.logging_std import get_logger

logger = get_logger(__name__)


# =========================
# CONFIG MODELS
# =========================


class ForecastSettings(BaseModel):
    """Defaults used when a plan mapping leaves a field out."""

    default_horizon_weeks: int = Field(default=12, ge=1)
    default_events_per_week: int = Field(default=1, ge=1)


class ScenarioSettings(BaseModel):
    """
    allow_sign_inversion:
      - False (default): modifiers below -100 are clamped to -100 (metric floors at zero).
      - True: modifiers are applied as given, a -150 modifier flips the sign.
    """

    allow_sign_inversion: bool = False


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "text"

    @field_validator("format")
    @classmethod
    def _known_format(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("text", "json"):
            raise ValueError("logging.format must be 'text' or 'json'")
        return v


class AppConfig(BaseModel):
    forecast: ForecastSettings = Field(default_factory=ForecastSettings)
    scenario: ScenarioSettings = Field(default_factory=ScenarioSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# =========================
# LOADER
# =========================

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "default.yml"

_APP_CONFIG: Optional[AppConfig] = None


def _read_raw_yaml(path: Path) -> Dict[str, Any]:
    """Read YAML safely. Any problem returns an empty mapping (defaults win)."""
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning(
            "Config file not found, using defaults",
            extra={"extra_data": {"config_path": str(path)}},
        )
        return {}
    except (OSError, yaml.YAMLError) as exc:
        logger.error(
            "Error reading config file, using defaults",
            extra={"extra_data": {"config_path": str(path), "error": str(exc)}},
        )
        return {}

    if not isinstance(data, dict):
        logger.error(
            "Config YAML root is not a mapping, using defaults",
            extra={"extra_data": {"config_path": str(path)}},
        )
        return {}
    return data


def _parse_bool(v: str) -> bool:
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def _override_with_env(raw: Dict[str, Any]) -> Dict[str, Any]:
    out = {k: (dict(v) if isinstance(v, dict) else v) for k, v in raw.items()}

    level = os.getenv("PLANCAST_LOG_LEVEL")
    if level:
        out.setdefault("logging", {})["level"] = level
    fmt = os.getenv("PLANCAST_LOG_FORMAT")
    if fmt:
        out.setdefault("logging", {})["format"] = fmt
    inversion = os.getenv("PLANCAST_ALLOW_SIGN_INVERSION")
    if inversion:
        out.setdefault("scenario", {})["allow_sign_inversion"] = _parse_bool(inversion)
    return out


def load_config(path: Optional[Path] = None) -> AppConfig:
    """
    Load config from YAML, apply PLANCAST_* env overrides, validate with pydantic.

    - No file -> defaults.
    - Malformed file or invalid values -> defaults (logged).
    - Cached in memory when no explicit path is given.
    """
    global _APP_CONFIG

    if _APP_CONFIG is not None and path is None:
        return _APP_CONFIG

    if path is not None:
        config_path = Path(path)
    else:
        env_path = os.getenv("PLANCAST_CONFIG")
        config_path = Path(env_path) if env_path else _DEFAULT_CONFIG_PATH

    raw = _override_with_env(_read_raw_yaml(config_path))

    try:
        app_config = AppConfig(**raw)
    except (ValidationError, TypeError) as exc:
        logger.error(
            "Invalid config, using defaults",
            extra={"extra_data": {"config_path": str(config_path), "error": str(exc)}},
        )
        app_config = AppConfig()

    if path is None:
        _APP_CONFIG = app_config
    return app_config


def reset_config_cache() -> None:
    global _APP_CONFIG
    _APP_CONFIG = None


def get_app_config() -> AppConfig:
    """Shortcut for the cached global config."""
    return load_config()
