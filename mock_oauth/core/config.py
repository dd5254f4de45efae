from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _getenv(name: str, default: str) -> str:
    # Centralize env access so it’s easy to extend later (type casting, required vars)
    return os.environ.get(name, default).strip()


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"{name} must be true|false (got {raw!r})")


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    host: str
    port: int
    clients_file: Path
    users_file: Path
    cors_origins: tuple[str, ...]

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    port_raw = _getenv("PORT", "9000")

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None
    if not 0 < port < 65536:
        raise ValueError(f"PORT must be between 1 and 65535 (got {port})")

    log_json = _parse_bool("LOG_JSON", _getenv("LOG_JSON", "false"))

    # Relative registry paths are resolved against the project root so the
    # server starts the same way from any working directory.
    clients_file = Path(_getenv("CLIENTS_FILE", "config/clients.json"))
    users_file = Path(_getenv("USERS_FILE", "config/users.json"))
    if not clients_file.is_absolute():
        clients_file = PROJECT_ROOT / clients_file
    if not users_file.is_absolute():
        users_file = PROJECT_ROOT / users_file

    cors_origins = tuple(
        origin.strip()
        for origin in _getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    )

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=log_json,
        host=_getenv("HOST", "127.0.0.1"),
        port=port,
        clients_file=clients_file,
        users_file=users_file,
        cors_origins=cors_origins,
    )


# Optional: module-level singleton so imports are cheap
SETTINGS = load_settings()
