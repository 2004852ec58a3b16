# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace

import pytest

from todo_alarm.core.state import AppState
from todo_alarm.tasks.task_scheduler import DueAlarmScheduler
from todo_alarm.tasks.task_store import TaskStore

from .fakes import FakeClock, RecordingNotifier


@pytest.fixture()
def settings() -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        tick_interval_seconds=0.01,
        default_category="basic",
        sound_enabled=False,
        chime_enabled=False,
        alarm_tone_hz=880,
        alarm_tone_seconds=0.1,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 5, 14, 13, 59, 50))


@pytest.fixture()
def store(clock: FakeClock) -> TaskStore:
    return TaskStore(clock=clock)


@pytest.fixture()
def scheduler(store: TaskStore, clock: FakeClock) -> DueAlarmScheduler:
    return DueAlarmScheduler(store, interval_seconds=0.01, clock=clock)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    store: TaskStore,
    scheduler: DueAlarmScheduler,
    notifier: RecordingNotifier,
) -> AppState:
    """AppState wired with the in-memory store and a recording notifier."""
    scheduler.subscribe(notifier.notify)
    return AppState(settings=settings, store=store, scheduler=scheduler, notifier=notifier)
