# src/taskdesk/storage/keys.py

"""Well-known keys of the shared key-value store."""

from __future__ import annotations

from typing import Final

USERS_KEY: Final = "users"
SESSION_KEY: Final = "currentUser"
THEME_KEY: Final = "theme"
TASKS_PREFIX: Final = "tasks_"


def tasks_key(username: str) -> str:
    return f"{TASKS_PREFIX}{username}"


def owner_of_tasks_key(key: str) -> str | None:
    """Return the username encoded in a `tasks_<username>` key, else None."""
    if not key.startswith(TASKS_PREFIX):
        return None
    return key[len(TASKS_PREFIX):]
