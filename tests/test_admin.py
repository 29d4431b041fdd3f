# tests/test_admin.py

from __future__ import annotations

import json

import pytest

from taskdesk.accounts.admin import is_admin
from taskdesk.accounts.models import Identity
from taskdesk.core.errors import AuthError, ErrorCode


def _seed(state) -> None:
    state.directory.register("ann", "a@x.com", "secret1")
    state.directory.register("bob", "b@x.com", "secret2")
    state.task_store.add_task("ann", title="ann task")
    state.task_store.add_task("bob", title="bob task")
    state.task_store.add_task("Admin_00", title="admin task")
    state.store.set_item("theme", "dark")


def test_is_admin_is_exact_match() -> None:
    assert is_admin(None) is False
    assert is_admin(Identity("Admin_00", "admin@system.com")) is True
    assert is_admin(Identity("admin_00", "admin@system.com")) is False
    assert is_admin(Identity("ann", "a@x.com")) is False


@pytest.mark.parametrize("login", [None, ("ann", "secret1")])
def test_admin_operations_require_admin(state, login) -> None:
    _seed(state)
    if login:
        state.sessions.login(*login)

    for call in (
        state.admin.list_accounts,
        lambda: state.admin.delete_user("bob"),
        state.admin.cleanup_all_except_admin,
    ):
        with pytest.raises(AuthError) as exc:
            call()
        assert exc.value.code is ErrorCode.ADMIN_REQUIRED

    assert state.directory.count() == 3
    assert state.store.get_item("tasks_bob") is not None


def test_admin_lists_accounts_with_passwords(state) -> None:
    _seed(state)
    state.sessions.login("Admin_00", "admin123")

    records = state.admin.list_accounts()

    assert [(r.username, r.password) for r in records] == [
        ("Admin_00", "admin123"),
        ("ann", "secret1"),
        ("bob", "secret2"),
    ]


def test_admin_delete_user_removes_record_and_tasks(state) -> None:
    _seed(state)
    state.sessions.login("Admin_00", "admin123")

    assert state.admin.delete_user("ann") is True

    assert state.directory.get("ann") is None
    assert state.store.get_item("tasks_ann") is None
    assert state.store.get_item("tasks_bob") is not None


def test_admin_cannot_delete_itself(state) -> None:
    state.sessions.login("Admin_00", "admin123")

    with pytest.raises(AuthError) as exc:
        state.admin.delete_user("Admin_00")
    assert exc.value.code is ErrorCode.PROTECTED_ACCOUNT
    assert state.directory.get("Admin_00") is not None


def test_cleanup_leaves_only_admin_and_admin_tasks(state) -> None:
    _seed(state)
    state.sessions.login("Admin_00", "admin123")

    removed = state.admin.cleanup_all_except_admin()

    assert removed == ["ann", "bob"]
    assert [r.username for r in state.directory.list_accounts()] == ["Admin_00"]
    task_keys = [k for k in state.store.keys() if k.startswith("tasks_")]
    assert task_keys == ["tasks_Admin_00"]
    # unrelated keys and the admin session survive
    assert state.store.get_item("theme") == "dark"
    assert state.sessions.current_session().username == "Admin_00"


def test_cleanup_drops_non_admin_session(state, monkeypatch) -> None:
    """Any session other than Admin_00 still in the store after the purge is cleared."""
    _seed(state)
    state.sessions.login("Admin_00", "admin123")

    original = state.directory.cleanup_all_except_admin

    def cleanup_and_swap_session() -> list[str]:
        removed = original()
        state.store.set_item("currentUser", json.dumps({"username": "ann", "email": "a@x.com"}))
        return removed

    monkeypatch.setattr(state.directory, "cleanup_all_except_admin", cleanup_and_swap_session)
    state.admin.cleanup_all_except_admin()

    assert state.sessions.current_session() is None
