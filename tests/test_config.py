# tests/test_config.py

from __future__ import annotations

from pathlib import Path

from taskdesk.cli.bootstrap import create_initial_state
from taskdesk.config import Settings


def test_settings_defaults(monkeypatch) -> None:
    for name in (
        "TASKDESK_APP_NAME",
        "TASKDESK_LOG_LEVEL",
        "TASKDESK_DATA_DIR",
        "TASKDESK_STORE_DB_PATH",
        "TASKDESK_BACKUP_DIR",
        "TASKDESK_ADMIN_EMAIL",
        "TASKDESK_ADMIN_PASSWORD",
    ):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()

    assert s.app_name == "taskdesk"
    assert s.data_dir == Path(".local/taskdesk")
    assert s.store_db_path == Path(".local/taskdesk/store.sqlite3")
    assert s.backup_dir == Path(".local/taskdesk/backups")
    assert s.admin_email == "admin@system.com"
    assert s.admin_password == "admin123"


def test_settings_from_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKDESK_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("TASKDESK_STORE_DB_PATH", raising=False)
    monkeypatch.setenv("TASKDESK_ADMIN_PASSWORD", "changeme!")

    s = Settings.from_env()

    assert s.store_db_path == tmp_path / "store.sqlite3"
    assert s.admin_password == "changeme!"


def test_create_initial_state_bootstraps_sqlite_store(settings) -> None:
    state = create_initial_state(settings=settings)

    assert settings.store_db_path.exists()
    assert settings.backup_dir.is_dir()
    assert [r.username for r in state.directory.list_accounts()] == ["Admin_00"]

    # a second start over the same file keeps a single admin and the session
    state.sessions.login("Admin_00", "admin123")
    again = create_initial_state(settings=settings)
    assert again.directory.count() == 1
    assert again.sessions.current_session().username == "Admin_00"
    assert again.tasks_cache == []
