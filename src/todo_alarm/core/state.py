# src/todo_alarm/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_models import TaskView
from ..tasks.task_scheduler import DueAlarmScheduler
from ..tasks.task_store import TaskStore
from .ports import AlarmSink


@dataclass
class AppState:
    # Settings object (config.Settings or a test double with the same attributes).
    settings: object

    store: TaskStore
    scheduler: DueAlarmScheduler
    notifier: AlarmSink

    # The list the user is looking at; also the default category for /add.
    active_view: TaskView = TaskView.ALL
