# src/taskdesk/tasks/task_store.py

from __future__ import annotations

import json
import logging
import time
from collections.abc import Iterable
from datetime import UTC, datetime

from ..core.errors import ErrorCode, ValidationError
from ..core.ports import KeyValueStore
from ..storage.keys import owner_of_tasks_key, tasks_key
from .task_models import Task, TaskPriority, TaskStats, TaskStatus

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Per-user task lists, one JSON array per `tasks_<username>` key.

    Lists are ordered newest first. Every mutating call is a full
    load -> modify -> save of that user's list.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    # ---- low-level helpers ----

    @staticmethod
    def _new_id(existing: Iterable[Task]) -> str:
        taken = {t.id for t in existing}
        n = int(time.time() * 1000)
        while str(n) in taken:
            n += 1
        return str(n)

    @staticmethod
    def _now_iso() -> str:
        return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")

    @staticmethod
    def _check_priority(priority: str) -> str:
        try:
            return TaskPriority(priority.strip().lower()).value
        except ValueError:
            allowed = ", ".join(p.value for p in TaskPriority)
            raise ValidationError(
                ErrorCode.INVALID_PRIORITY, f"Priority must be one of: {allowed}."
            ) from None

    @staticmethod
    def _index_of(tasks: list[Task], task_id: str) -> int:
        for i, t in enumerate(tasks):
            if t.id == task_id:
                return i
        raise ValidationError(ErrorCode.TASK_NOT_FOUND, f"No task with id {task_id}.")

    # ---- collaborator API (accounts / console) ----

    def load_tasks_for(self, username: str) -> list[Task]:
        raw = self._store.get_item(tasks_key(username))
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Task list for username=%s is not valid JSON; ignoring it.", username)
            return []
        if not isinstance(data, list):
            logger.warning("Task list for username=%s is not an array; ignoring it.", username)
            return []
        return [Task.from_dict(item) for item in data if isinstance(item, dict)]

    def save_tasks_for(self, username: str, tasks: list[Task]) -> None:
        self._store.set_item(tasks_key(username), json.dumps([t.to_dict() for t in tasks]))

    def delete_all_tasks_for(self, username: str) -> None:
        self._store.remove_item(tasks_key(username))

    def delete_all_tasks_except(self, username: str) -> list[str]:
        keep = tasks_key(username)
        doomed = [k for k in self._store.keys() if owner_of_tasks_key(k) is not None and k != keep]
        for key in doomed:
            self._store.remove_item(key)
        return doomed

    def task_owners(self) -> list[str]:
        owners = (owner_of_tasks_key(k) for k in self._store.keys())
        return [o for o in owners if o is not None]

    # ---- CRUD scoped to one user ----

    def add_task(
        self,
        username: str,
        *,
        title: str,
        description: str = "",
        priority: str = TaskPriority.MEDIUM.value,
        due_date: str | None = None,
    ) -> Task:
        if not title or not title.strip():
            raise ValidationError(ErrorCode.EMPTY_FIELD, "Task title is required.")

        tasks = self.load_tasks_for(username)
        task = Task(
            id=self._new_id(tasks),
            title=title.strip(),
            description=(description or "").strip(),
            priority=self._check_priority(priority),
            due_date=(due_date or "").strip() or None,
            status=TaskStatus.PENDING,
            created_at=self._now_iso(),
        )
        tasks.insert(0, task)
        self.save_tasks_for(username, tasks)
        logger.debug("Task added id=%s username=%s", task.id, username)
        return task

    def update_task(
        self,
        username: str,
        task_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        priority: str | None = None,
        due_date: str | None = None,
    ) -> Task:
        """Edit fields in place. Status and createdAt are never touched here."""
        tasks = self.load_tasks_for(username)
        task = tasks[self._index_of(tasks, task_id)]

        if title is not None:
            if not title.strip():
                raise ValidationError(ErrorCode.EMPTY_FIELD, "Task title is required.")
            task.title = title.strip()
        if description is not None:
            task.description = description.strip()
        if priority is not None:
            task.priority = self._check_priority(priority)
        if due_date is not None:
            task.due_date = due_date.strip() or None

        self.save_tasks_for(username, tasks)
        return task

    def delete_task(self, username: str, task_id: str) -> None:
        tasks = self.load_tasks_for(username)
        del tasks[self._index_of(tasks, task_id)]
        self.save_tasks_for(username, tasks)

    def toggle_status(self, username: str, task_id: str) -> Task:
        tasks = self.load_tasks_for(username)
        task = tasks[self._index_of(tasks, task_id)]
        task.status = task.status.toggled()
        self.save_tasks_for(username, tasks)
        return task


def stats(tasks: list[Task]) -> TaskStats:
    pending = sum(1 for t in tasks if t.status is TaskStatus.PENDING)
    completed = sum(1 for t in tasks if t.status is TaskStatus.COMPLETED)
    return TaskStats(total=len(tasks), pending=pending, completed=completed)


def filter_tasks(
    tasks: list[Task],
    *,
    search: str = "",
    status: str | None = None,
    priority: str | None = None,
) -> list[Task]:
    """Case-insensitive search over title and description, plus exact filters."""
    needle = (search or "").strip().lower()
    out: list[Task] = []
    for t in tasks:
        if needle and needle not in t.title.lower() and needle not in t.description.lower():
            continue
        if status and t.status.value != status:
            continue
        if priority and t.priority != priority:
            continue
        out.append(t)
    return out
