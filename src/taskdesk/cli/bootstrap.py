# src/taskdesk/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- opens the SQLite key-value store and wires the account layer into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState, build_state
from ..storage.kv_store import SQLiteKeyValueStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.backup_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = SQLiteKeyValueStore(settings.store_db_path)
    state = build_state(settings, store)
    logger.info(
        "State ready accounts=%d mode=%s",
        state.directory.count(),
        state.sessions.ui_mode().value,
    )
    return state
