# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class RecordingTaskRepo:
    """
    In-memory TaskRepo for account-directory unit tests.

    Keeps task lists in a plain dict and records every cascading delete,
    so tests can assert on what the directory asked for.
    """

    lists: dict[str, list[Any]] = field(default_factory=dict)
    deleted_for: list[str] = field(default_factory=list)
    kept_on_purge: list[str] = field(default_factory=list)

    def delete_all_tasks_for(self, username: str) -> None:
        self.deleted_for.append(username)
        self.lists.pop(username, None)

    def delete_all_tasks_except(self, username: str) -> list[str]:
        self.kept_on_purge.append(username)
        doomed = [u for u in self.lists if u != username]
        for u in doomed:
            del self.lists[u]
        return [f"tasks_{u}" for u in doomed]

    def load_tasks_for(self, username: str) -> list[Any]:
        return list(self.lists.get(username, []))

    def save_tasks_for(self, username: str, tasks: list[Any]) -> None:
        self.lists[username] = list(tasks)
