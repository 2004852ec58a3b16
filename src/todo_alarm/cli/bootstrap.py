# src/todo_alarm/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- wires the task store, the alarm scheduler and alarm delivery into AppState.
"""

from __future__ import annotations

import logging

from ..alerts.notifier import AlarmNotifier
from ..config import get_settings
from ..core.ports import Emitter
from ..core.state import AppState
from ..tasks.task_scheduler import Clock, DueAlarmScheduler
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_initial_state(
    *,
    settings=None,
    emit: Emitter | None = None,
    clock: Clock | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the clock) injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    store = TaskStore(clock=clock)
    scheduler = DueAlarmScheduler(
        store,
        interval_seconds=getattr(settings, "tick_interval_seconds", 1.0),
        clock=clock,
    )
    notifier = AlarmNotifier(
        emit,
        sound_enabled=bool(getattr(settings, "sound_enabled", False)),
        chime_enabled=bool(getattr(settings, "chime_enabled", False)),
        settings=settings,
    )
    scheduler.subscribe(notifier.notify)

    logger.info(
        "State ready (interval=%.2fs sound=%s)",
        scheduler.interval_seconds,
        notifier.sound_enabled,
    )
    return AppState(settings=settings, store=store, scheduler=scheduler, notifier=notifier)
