# src/todo_alarm/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class TaskCategory(StrEnum):
    """Fixed task categories. A task's category never changes after creation."""

    ROUTINE = "routine"
    IMPORTANT = "important"
    BASIC = "basic"

    @classmethod
    def parse(cls, raw: TaskCategory | str | None) -> TaskCategory | None:
        if isinstance(raw, cls):
            return raw
        if not raw:
            return None
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return None


class TaskView(StrEnum):
    """
    Filter views.

    Notes:
    - "all" is a pseudo-category used only for filtering, never stored on a task.
    """

    ALL = "all"
    ROUTINE = "routine"
    IMPORTANT = "important"
    BASIC = "basic"

    @classmethod
    def parse(cls, raw: TaskView | str | None) -> TaskView | None:
        if isinstance(raw, cls):
            return raw
        if not raw:
            return None
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return None

    @property
    def category(self) -> TaskCategory | None:
        if self is TaskView.ALL:
            return None
        return TaskCategory(self.value)

    @property
    def heading(self) -> str:
        if self is TaskView.ALL:
            return "All Tasks"
        return f"{self.value.capitalize()} Tasks"


@dataclass(slots=True, frozen=True)
class Task:
    id: int
    text: str
    category: TaskCategory
    created_at: datetime
    completed: bool = False
    due_time: datetime | None = None

    # Completion history used by the alarm scheduler.
    completed_at: datetime | None = None
    reopened_at: datetime | None = None
    # Sticky: the task was completed when its due time passed.
    missed_while_completed: bool = False


@dataclass(slots=True, frozen=True)
class AlarmEvent:
    """One alarm for one task; emitted at most once per task."""

    task: Task
    fired_at: datetime

    @property
    def task_id(self) -> int:
        return self.task.id

    @property
    def text(self) -> str:
        return self.task.text

    @property
    def due_time(self) -> datetime | None:
        return self.task.due_time
