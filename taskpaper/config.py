"""Configuration loading for the task index service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASKPAPER"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 18170
DEFAULT_LOG_LEVEL = "INFO"


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class AppConfig:
    library_path: Path
    service_token: str | None = None
    commit_edits: bool = True
    log_level: str = DEFAULT_LOG_LEVEL
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


def _key(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _read_dotenv_value(dotenv_path: Path, key: str) -> str | None:
    """Read a single key from a .env file without mutating the environment."""
    if not dotenv_path.is_file():
        return None
    try:
        content = dotenv_path.read_text(encoding="utf-8")
    except OSError:
        return None

    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export ") :].strip()
        if "=" not in stripped:
            continue
        name, value = stripped.split("=", 1)
        if name.strip() != key:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        return value or None
    return None


def _read_setting(dotenv_path: Path, key: str) -> str | None:
    raw_value = os.environ.get(key)
    if raw_value is None:
        raw_value = _read_dotenv_value(dotenv_path, key)
    if raw_value is None:
        return None
    return raw_value.strip() or None


def _read_bool(raw_value: str | None, *, default: bool, key: str) -> bool:
    if raw_value is None:
        return default
    normalized = raw_value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ConfigError(f"{key} must be a boolean value.")


def _read_port(raw_value: str | None, *, key: str) -> int:
    if raw_value is None:
        return DEFAULT_PORT
    try:
        port = int(raw_value)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer.") from exc
    if not 0 < port < 65536:
        raise ConfigError(f"{key} must be between 1 and 65535.")
    return port


def _read_log_level(raw_value: str | None, *, key: str) -> str:
    if raw_value is None:
        return DEFAULT_LOG_LEVEL
    level = raw_value.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"{key} must be a logging level name.")
    return level


def load_config() -> AppConfig:
    """Load configuration from the environment, falling back to ./.env."""
    dotenv_path = Path.cwd() / ".env"

    library_key = _key("LIBRARY_PATH")
    raw_path = _read_setting(dotenv_path, library_key)
    if not raw_path:
        raise ConfigError(
            f"{library_key} is required; set it to the document library root."
        )

    commit_key = _key("COMMIT_EDITS")
    log_level_key = _key("LOG_LEVEL")
    port_key = _key("PORT")

    return AppConfig(
        library_path=Path(raw_path).expanduser().resolve(),
        service_token=_read_setting(dotenv_path, _key("SERVICE_TOKEN")),
        commit_edits=_read_bool(
            _read_setting(dotenv_path, commit_key), default=True, key=commit_key
        ),
        log_level=_read_log_level(
            _read_setting(dotenv_path, log_level_key), key=log_level_key
        ),
        host=_read_setting(dotenv_path, _key("HOST")) or DEFAULT_HOST,
        port=_read_port(_read_setting(dotenv_path, port_key), key=port_key),
    )
