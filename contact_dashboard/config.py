"""Configuration helpers for the Contact Dashboard."""
from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib import parse as urlparse

import yaml
from dotenv import load_dotenv


class ConfigError(RuntimeError):
    """Raised when configuration is missing or invalid."""


DEFAULT_API_URL = "http://localhost:8081"
DEFAULT_CONFIG_PATH = Path("config") / "contacts.yml"


@dataclass(slots=True)
class Settings:
    """Runtime configuration for the dashboard API and CLI."""

    api_base_url: str = DEFAULT_API_URL
    api_token: Optional[str] = None
    timeout_seconds: float = 15.0
    environment: str = "local"
    download_dir: Path = field(default_factory=Path.cwd)
    notification_ttl_seconds: Optional[float] = 5.0
    allowed_origins: List[str] = field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    )


# YAML key -> (Settings attribute, env var)
_FIELDS = {
    "api_url": ("api_base_url", "CONTACTS_API_URL"),
    "api_token": ("api_token", "CONTACTS_API_TOKEN"),
    "timeout_seconds": ("timeout_seconds", "CONTACTS_TIMEOUT_SECONDS"),
    "environment": ("environment", "CONTACTS_ENV"),
    "download_dir": ("download_dir", "CONTACTS_DOWNLOAD_DIR"),
    "notification_ttl": ("notification_ttl_seconds", "CONTACTS_NOTIFICATION_TTL"),
}


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _coerce_float(name: str, value: Any, *, allow_none: bool = False) -> Optional[float]:
    if value in (None, ""):
        if allow_none:
            return None
        raise ConfigError(f"{name} must be a number")
    if isinstance(value, str) and value.strip().lower() in ("none", "off", "0") and allow_none:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc
    if number <= 0:
        if allow_none:
            return None
        raise ConfigError(f"{name} must be positive, got {value!r}")
    return number


def _validate_url(url: str) -> str:
    parsed = urlparse.urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(
            f"Invalid contacts API URL '{url}'. Expected http(s)://host[:port]."
        )
    return url.rstrip("/")


def load_settings(
    *,
    config_path: Optional[Path] = None,
    env_file: Optional[Path] = None,
) -> Settings:
    """Load settings from defaults, an optional YAML file and the environment.

    Args:
        config_path: YAML file to read. Defaults to ``$CONTACTS_CONFIG`` or
            ``config/contacts.yml`` when that file exists.
        env_file: Optional ``.env`` file loaded before reading variables.

    Returns:
        Settings with every source merged (environment wins).

    Raises:
        ConfigError: if a value is malformed or an explicit config file is missing.
    """

    load_dotenv(dotenv_path=env_file)

    raw: Dict[str, Any] = {}
    explicit = config_path or os.getenv("CONTACTS_CONFIG")
    if explicit:
        path = Path(explicit)
        if not path.exists():
            raise ConfigError(f"Config file not found at {path}")
        raw.update(_load_yaml(path))
    elif DEFAULT_CONFIG_PATH.exists():
        raw.update(_load_yaml(DEFAULT_CONFIG_PATH))

    values: Dict[str, Any] = {}
    for key, (attr, env_var) in _FIELDS.items():
        if key in raw:
            values[attr] = raw[key]
        env_value = os.getenv(env_var)
        if env_value is not None and env_value.strip() != "":
            values[attr] = env_value.strip()

    settings = Settings()
    settings.api_base_url = _validate_url(
        str(values.get("api_base_url", settings.api_base_url))
    )

    if values.get("api_token"):
        settings.api_token = str(values["api_token"])
    if "timeout_seconds" in values:
        settings.timeout_seconds = _coerce_float(
            "timeout_seconds", values["timeout_seconds"]
        )
    if "environment" in values:
        settings.environment = str(values["environment"])
    if "download_dir" in values:
        settings.download_dir = Path(str(values["download_dir"])).expanduser()
    if "notification_ttl_seconds" in values:
        settings.notification_ttl_seconds = _coerce_float(
            "notification_ttl", values["notification_ttl_seconds"], allow_none=True
        )

    origins = raw.get("allowed_origins")
    if origins:
        settings.allowed_origins = [str(origin) for origin in origins]
    extra_origin = os.getenv("CONTACTS_ALLOWED_FRONTEND", "").strip()
    if extra_origin and extra_origin not in settings.allowed_origins:
        settings.allowed_origins.append(extra_origin)

    return settings
