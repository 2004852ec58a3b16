# src/todo_alarm/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The scheduler and the presentation layer depend on Protocols instead of concrete
implementations. This keeps alert delivery swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import Protocol

from ..tasks.task_models import AlarmEvent, Task

Emitter = Callable[[str], None]
# User-visible output (console print, notification popup, ...).


class TaskSource(Protocol):
    """Read side of the task store, as seen by the alarm scheduler."""
    def snapshot(self) -> tuple[Task, ...]: ...


class AlarmSink(Protocol):
    """
    Alert-side port: how the user is told that a task is due.

    Implementations must be best-effort and non-blocking; the scheduler logs
    and swallows anything they raise.
    """

    def notify(self, event: AlarmEvent) -> None: ...
    def chime(self) -> None: ...
    def shutdown(self) -> None: ...
