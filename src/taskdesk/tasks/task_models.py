# src/taskdesk/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def from_raw(cls, raw: Any) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except Exception:
            return cls.PENDING

    def toggled(self) -> TaskStatus:
        return TaskStatus.COMPLETED if self is TaskStatus.PENDING else TaskStatus.PENDING


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(slots=True)
class Task:
    """
    One task of a user's list.

    Serialized with camelCase keys (`dueDate`, `createdAt`); stored lists and
    backup artifacts depend on that layout.
    """

    id: str
    title: str
    description: str
    priority: str
    due_date: str | None
    status: TaskStatus
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "dueDate": self.due_date,
            "status": self.status.value,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        due = raw.get("dueDate")
        return cls(
            id=str(raw.get("id", "")),
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
            priority=str(raw.get("priority") or TaskPriority.MEDIUM.value),
            due_date=str(due) if due else None,
            status=TaskStatus.from_raw(raw.get("status")),
            created_at=str(raw.get("createdAt") or ""),
        )


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    pending: int
    completed: int
