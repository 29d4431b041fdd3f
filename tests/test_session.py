# tests/test_session.py

from __future__ import annotations

import json

import pytest

from taskdesk.accounts.admin import is_admin
from taskdesk.accounts.models import Identity, UiMode
from taskdesk.core.errors import AuthError, ErrorCode, ValidationError


def test_admin_login_with_default_credentials(state) -> None:
    session = state.sessions.login("Admin_00", "admin123")

    assert session == Identity(username="Admin_00", email="admin@system.com")
    assert state.sessions.current_session() == session
    assert is_admin(session) is True
    assert json.loads(state.store.get_item("currentUser")) == {
        "username": "Admin_00",
        "email": "admin@system.com",
    }


def test_login_keeps_stored_username_casing(state) -> None:
    state.directory.register("Ann", "a@x.com", "secret1")
    session = state.sessions.login("ann", "secret1")
    assert session.username == "Ann"
    assert is_admin(session) is False


def test_failed_login_leaves_previous_session(state) -> None:
    state.directory.register("ann", "a@x.com", "secret1")
    state.sessions.login("ann", "secret1")

    with pytest.raises(AuthError) as exc:
        state.sessions.login("Admin_00", "wrong")
    assert exc.value.code is ErrorCode.INVALID_CREDENTIALS
    assert state.sessions.current_session().username == "ann"


def test_login_rejects_blank_credentials(state) -> None:
    with pytest.raises(ValidationError) as exc:
        state.sessions.login("  ", "admin123")
    assert exc.value.code is ErrorCode.EMPTY_FIELD
    assert state.sessions.current_session() is None


def test_logout_is_idempotent_and_switches_mode(state) -> None:
    assert state.sessions.ui_mode() is UiMode.AUTH
    state.sessions.login("Admin_00", "admin123")
    assert state.sessions.ui_mode() is UiMode.APPLICATION

    state.sessions.logout()
    state.sessions.logout()

    assert state.sessions.current_session() is None
    assert state.sessions.ui_mode() is UiMode.AUTH
    assert state.store.get_item("currentUser") is None


def test_require_session(state) -> None:
    with pytest.raises(AuthError) as exc:
        state.sessions.require_session()
    assert exc.value.code is ErrorCode.NOT_LOGGED_IN


@pytest.mark.parametrize("raw", ["not json", "[]", '{"username": "ann"}', "null"])
def test_unreadable_session_reads_as_logged_out(state, raw: str) -> None:
    state.store.set_item("currentUser", raw)
    assert state.sessions.current_session() is None
    assert state.sessions.ui_mode() is UiMode.AUTH


def test_session_projection_is_not_refreshed_by_password_change(state) -> None:
    state.directory.register("ann", "a@x.com", "secret1")
    before = state.sessions.login("ann", "secret1")

    state.directory.change_password("ann", "secret1", "newpass1")

    assert state.sessions.current_session() == before


def test_login_notifies_listeners(state) -> None:
    seen: list[str] = []
    state.sessions.add_login_listener(lambda identity: seen.append(identity.username))

    def broken(_identity: Identity) -> None:
        raise RuntimeError("boom")

    state.sessions.add_login_listener(broken)
    state.sessions.login("Admin_00", "admin123")

    assert seen == ["Admin_00"]
    assert state.sessions.current_session() is not None


def test_login_loads_that_users_tasks(state) -> None:
    state.directory.register("ann", "a@x.com", "secret1")
    state.task_store.add_task("ann", title="Buy milk")

    state.sessions.login("ann", "secret1")

    assert [t.title for t in state.tasks_cache] == ["Buy milk"]


def test_invalidate_unless(state) -> None:
    state.directory.register("ann", "a@x.com", "secret1")
    state.sessions.login("ann", "secret1")

    assert state.sessions.invalidate_unless("ann") is False
    assert state.sessions.invalidate_unless("Admin_00") is True
    assert state.sessions.current_session() is None
    assert state.sessions.invalidate_unless("Admin_00") is False
