# src/todo_alarm/tasks/task_scheduler.py

from __future__ import annotations

"""
Due-time alarm scheduler.

A small polling loop that, on every tick:
- takes a snapshot of the task store,
- finds incomplete tasks whose due time has been reached,
- emits one AlarmEvent per task, at most once per task for the scheduler's lifetime.

Evaluation (scan_due_tasks) is a pure function of (snapshot, now, alarmed ids);
the timer only decides when to call it.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime

from ..core.ports import TaskSource
from .task_models import AlarmEvent, Task

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
AlarmListener = Callable[[AlarmEvent], None]


@dataclass(slots=True, frozen=True)
class DueScan:
    """
    Result of one evaluation pass.

    due:      tasks to alarm now (snapshot order)
    consumed: ids to mark as alarmed without emitting anything
    """

    due: list[Task] = field(default_factory=list)
    consumed: list[int] = field(default_factory=list)


def scan_due_tasks(
        tasks: Iterable[Task],
        *,
        now: datetime,
        alarmed: set[int] | frozenset[int],
) -> DueScan:
    """
    Evaluate a snapshot against `now`.

    Order of checks per task:
    - no due time            -> skip
    - completed              -> skip (consumed if already past due)
    - due time in the future -> skip
    - already alarmed        -> skip
    Tasks that cannot be evaluated (bad types, naive/aware mismatch) are skipped.
    """
    scan = DueScan()
    for task in tasks:
        try:
            task_id = int(task.id)
            due = task.due_time
            if due is None:
                continue

            reached = due <= now

            if task.completed:
                if reached and task_id not in alarmed:
                    scan.consumed.append(task_id)
                continue

            if not reached or task_id in alarmed:
                continue

            if task.missed_while_completed:
                scan.consumed.append(task_id)
                continue
        except Exception:
            logger.warning("Skipping task that cannot be evaluated: %r", task, exc_info=True)
            continue

        scan.due.append(task)
    return scan


def find_newly_due(
        tasks: Iterable[Task],
        *,
        now: datetime,
        alarmed: set[int] | frozenset[int],
) -> list[Task]:
    return scan_due_tasks(tasks, now=now, alarmed=alarmed).due


class DueAlarmScheduler:
    """
    Periodic due-time evaluation for a TaskStore.

    - tick() runs one evaluation and delivers alarms to subscribers
    - run() is the polling loop (cancel it to stop)
    - start()/stop() manage run() as an asyncio task on the running loop

    A task id is marked alarmed before delivery; a failing subscriber is logged
    and the alarm is not retried.
    """

    def __init__(
            self,
            store: TaskSource,
            *,
            interval_seconds: float = 1.0,
            clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._interval = max(0.01, float(interval_seconds))
        self._clock: Clock = clock or datetime.now
        self._alarmed: set[int] = set()
        self._listeners: list[AlarmListener] = []
        self._runner: asyncio.Task[None] | None = None
        self._stopped = False

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def alarmed_ids(self) -> frozenset[int]:
        return frozenset(self._alarmed)

    @property
    def running(self) -> bool:
        return self._runner is not None and not self._runner.done()

    def subscribe(self, listener: AlarmListener) -> Callable[[], None]:
        """Register an on_alarm listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _deliver(self, event: AlarmEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Alarm delivery failed task_id=%s", event.task_id)

    def tick(self, now: datetime | None = None) -> list[AlarmEvent]:
        """Run one evaluation pass. Returns the alarms emitted by this pass."""
        if self._stopped:
            return []

        now = now or self._clock()
        tasks = self._store.snapshot()

        # Deleted tasks never come back; drop their ids.
        live_ids = {t.id for t in tasks}
        self._alarmed.intersection_update(live_ids)

        scan = scan_due_tasks(tasks, now=now, alarmed=self._alarmed)

        for task_id in scan.consumed:
            self._alarmed.add(task_id)
            logger.debug("Task %s passed its due time while completed; no alarm", task_id)

        events: list[AlarmEvent] = []
        for task in scan.due:
            self._alarmed.add(task.id)
            event = AlarmEvent(task=task, fired_at=now)
            logger.info("Task %s is due (due=%s)", task.id, task.due_time)
            self._deliver(event)
            events.append(event)
        return events

    async def run(self) -> None:
        """
        Polling loop.

        Every interval_seconds: tick(). A failing tick is logged and the loop
        keeps going. To stop the loop, cancel the coroutine/task (or call stop()).
        """
        logger.info("Alarm scheduler started (interval=%.2fs)", self._interval)
        while True:
            try:
                self.tick()
            except Exception:
                logger.exception("Alarm scheduler tick failed")
            await asyncio.sleep(self._interval)

    def start(self) -> asyncio.Task[None]:
        """Schedule run() on the running event loop (no-op if already running)."""
        if self._runner is not None and not self._runner.done():
            return self._runner
        self._stopped = False
        self._runner = asyncio.get_running_loop().create_task(self.run())
        return self._runner

    def stop(self) -> None:
        """Cancel the timer and discard the alarmed set. No alarms after this."""
        self._stopped = True
        self._alarmed.clear()
        if self._runner is not None:
            self._runner.cancel()
        logger.info("Alarm scheduler stopped")

    async def aclose(self) -> None:
        """stop() and wait for the loop task to finish."""
        self.stop()
        runner, self._runner = self._runner, None
        if runner is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await runner
