# src/taskdesk/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every value has a default.
- Components receive settings by injection (tests pass a SimpleNamespace).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .accounts.models import DEFAULT_ADMIN_EMAIL, DEFAULT_ADMIN_PASSWORD

ENV_PREFIX = "TASKDESK"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


# A local .env never overrides variables already set in the environment.
load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    store_db_path: Path
    backup_dir: Path

    # ---- Default admin (username is fixed: Admin_00) ----
    admin_email: str
    admin_password: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskdesk").strip() or "taskdesk"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskdesk"))
        store_db_path = _env_path(_k("STORE_DB_PATH"), data_dir / "store.sqlite3")
        backup_dir = _env_path(_k("BACKUP_DIR"), data_dir / "backups")

        admin_email = _env(_k("ADMIN_EMAIL"), DEFAULT_ADMIN_EMAIL).strip() or DEFAULT_ADMIN_EMAIL
        admin_password = _env(_k("ADMIN_PASSWORD"), DEFAULT_ADMIN_PASSWORD) or DEFAULT_ADMIN_PASSWORD

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            store_db_path=store_db_path,
            backup_dir=backup_dir,
            admin_email=admin_email,
            admin_password=admin_password,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
