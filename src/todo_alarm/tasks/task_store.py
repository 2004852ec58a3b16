# src/todo_alarm/tasks/task_store.py

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime, time

from .task_models import Task, TaskCategory, TaskView

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
StateListener = Callable[[tuple[Task, ...]], None]

DUE_TIME_FORMAT = "%H:%M"


def parse_due_time(raw: str | time | None, *, day: date) -> datetime | None:
    """
    Resolve an hour:minute due time against the given calendar day.

    Accepts "HH:MM" (24h, as produced by a time picker) or a datetime.time.
    Seconds and microseconds are always zeroed.
    Returns None for missing or unparseable input.
    """
    if raw is None:
        return None

    if isinstance(raw, time):
        tod = raw
    else:
        s = str(raw).strip()
        if not s:
            return None
        try:
            tod = datetime.strptime(s, DUE_TIME_FORMAT).time()
        except ValueError:
            return None

    return datetime.combine(day, tod.replace(second=0, microsecond=0, tzinfo=None))


class TaskStore:
    """
    In-memory task store.

    The only owner of the task collection:
    - all mutations go through add_task / toggle_completion / delete_task
    - readers get an immutable snapshot (a tuple of frozen Task objects)
    - listeners are notified after every successful mutation

    Not-found and invalid input are reported through return values,
    never by raising.
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or datetime.now
        self._tasks: list[Task] = []
        self._ids = itertools.count(1)
        self._listeners: list[StateListener] = []

    def __len__(self) -> int:
        return len(self._tasks)

    # ---- events ----

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register an on_state_changed listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        tasks = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(tasks)
            except Exception:
                logger.exception("on_state_changed listener failed")

    # ---- lookup ----

    def _index_of(self, task_id: int) -> int | None:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None

    def get_task(self, task_id: int) -> Task | None:
        idx = self._index_of(task_id)
        return None if idx is None else self._tasks[idx]

    def snapshot(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def filter_by_category(self, view: TaskView | str) -> list[Task]:
        """
        Tasks visible in the given view, in insertion order.

        Raises ValueError for an unknown view name.
        """
        category = TaskView(view).category
        if category is None:
            return list(self._tasks)
        return [t for t in self._tasks if t.category == category]

    # ---- commands ----

    def add_task(
        self,
        text: str,
        category: TaskCategory | str,
        due_time_of_day: str | time | None = None,
    ) -> int | None:
        clean = (text or "").strip()
        if not clean:
            logger.debug("add_task declined: empty text")
            return None

        cat = TaskCategory.parse(category)
        if cat is None:
            logger.debug("add_task declined: unknown category %r", category)
            return None

        now = self._clock()
        due_time = parse_due_time(due_time_of_day, day=now.date())
        if due_time_of_day is not None and due_time is None:
            logger.debug("Ignoring invalid due time %r", due_time_of_day)

        task = Task(
            id=next(self._ids),
            text=clean,
            category=cat,
            created_at=now,
            due_time=due_time,
        )
        self._tasks.append(task)
        logger.info("Task %s added category=%s due=%s", task.id, cat.value, due_time)

        self._notify()
        return task.id

    def toggle_completion(self, task_id: int) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            return False

        task = self._tasks[idx]
        now = self._clock()
        if task.completed:
            missed = (
                task.due_time is not None
                and task.completed_at is not None
                and task.completed_at < task.due_time <= now
            )
            updated = replace(
                task,
                completed=False,
                reopened_at=now,
                missed_while_completed=task.missed_while_completed or missed,
            )
        else:
            updated = replace(task, completed=True, completed_at=now)
        self._tasks[idx] = updated
        logger.info("Task %s -> %s", task_id, "completed" if updated.completed else "open")

        self._notify()
        return True

    def delete_task(self, task_id: int) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            return False

        del self._tasks[idx]
        logger.info("Task %s deleted", task_id)

        self._notify()
        return True
