# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskdesk.core.state import AppState, build_state
from taskdesk.storage.kv_store import InMemoryKeyValueStore

from .fakes import RecordingTaskRepo


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskdesk-test",
        log_level="WARNING",
        data_dir=tmp_path,
        store_db_path=tmp_path / "store.sqlite3",
        backup_dir=tmp_path / "backups",
        admin_email="admin@system.com",
        admin_password="admin123",
    )


@pytest.fixture()
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def task_repo() -> RecordingTaskRepo:
    return RecordingTaskRepo()


@pytest.fixture()
def state(settings: SimpleNamespace, store: InMemoryKeyValueStore) -> AppState:
    """
    AppState wired over an in-memory store, default admin already bootstrapped.

    The real TaskStore is used: cascading deletes across `tasks_<user>` keys
    are part of what we want to test.
    """
    return build_state(settings, store)
