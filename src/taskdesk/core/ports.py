# src/taskdesk/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the account layer.

Accounts, sessions and backups depend on these Protocols instead of concrete
storage, so the SQLite store can be swapped for an in-memory one in tests.
"""

from typing import Any, Protocol


class KeyValueStore(Protocol):
    """Persistent, synchronous, string-keyed mapping of raw string values."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...
    def keys(self) -> list[str]: ...
    def count(self) -> int: ...


class TaskRepo(Protocol):
    # Consumed by the account directory (cascading deletes)
    def delete_all_tasks_for(self, username: str) -> None: ...
    def delete_all_tasks_except(self, username: str) -> list[str]: ...

    # Consumed by the console once a session exists
    def load_tasks_for(self, username: str) -> list[Any]: ...
    def save_tasks_for(self, username: str, tasks: list[Any]) -> None: ...
