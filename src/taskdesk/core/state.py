# src/taskdesk/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..accounts.admin import AdminAuthority
from ..accounts.directory import AccountDirectory
from ..accounts.session import SessionManager
from ..core.ports import KeyValueStore
from ..tasks.task_models import Task
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """
    Everything the console needs, built once by the composition root.

    `tasks_cache` mirrors the logged-in user's list; it is refreshed on login
    and after an import, and emptied on logout. `reload` also re-runs the
    default-admin bootstrap, since an import may replace the `users` key.
    """

    settings: Any
    store: KeyValueStore
    task_store: TaskStore
    directory: AccountDirectory
    sessions: SessionManager
    admin: AdminAuthority

    tasks_cache: list[Task] | None = None

    def reload(self) -> list[Task]:
        """Re-derive everything from the store, as a fresh start would."""
        self.directory.bootstrap_default_admin()
        return self.reload_tasks()

    def reload_tasks(self) -> list[Task]:
        session = self.sessions.current_session()
        self.tasks_cache = [] if session is None else self.task_store.load_tasks_for(session.username)
        return self.tasks_cache


def build_state(settings: Any, store: KeyValueStore) -> AppState:
    """Wire the account layer over `store` and bootstrap the default admin."""
    task_store = TaskStore(store)
    directory = AccountDirectory(
        store,
        task_store,
        admin_email=settings.admin_email,
        admin_password=settings.admin_password,
    )
    sessions = SessionManager(store, directory)
    state = AppState(
        settings=settings,
        store=store,
        task_store=task_store,
        directory=directory,
        sessions=sessions,
        admin=AdminAuthority(directory, sessions),
    )
    sessions.add_login_listener(lambda _identity: state.reload_tasks())
    directory.bootstrap_default_admin()
    if sessions.current_session() is not None:
        state.reload_tasks()
    return state
