from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from gstportal.env import load_env

_DEFAULT_DATABASE_URL = "sqlite:///storage/gstportal.db"


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


@dataclass(frozen=True)
class AppConfig:
    database_url: str = _DEFAULT_DATABASE_URL
    log_dir: Path = Path("./storage/logs")
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8080
    storage_secret: str = ""
    admin_username: str = "admin"

    @classmethod
    def from_env(cls) -> "AppConfig":
        load_env()
        return cls(
            database_url=(os.getenv("GP_DATABASE_URL") or _DEFAULT_DATABASE_URL).strip(),
            log_dir=Path(os.getenv("GP_LOG_DIR") or "./storage/logs"),
            debug=_env_bool("GP_DEBUG"),
            host=(os.getenv("GP_HOST") or "0.0.0.0").strip(),
            port=_env_int("GP_PORT", 8080),
            storage_secret=os.getenv("GP_STORAGE_SECRET", ""),
            admin_username=(os.getenv("GP_ADMIN_USERNAME") or "admin").strip() or "admin",
        )
