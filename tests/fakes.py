# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from todo_alarm.tasks.task_models import AlarmEvent


class FakeClock:
    """
    Controllable wall clock.

    Call it like datetime.now; move it with set() / advance().
    """

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@dataclass(slots=True)
class RecordingNotifier:
    """
    Fake AlarmSink used by scheduler and command tests.
    """

    alarms: list[AlarmEvent] = field(default_factory=list)
    chimes: int = 0
    closed: bool = False
    sound_enabled: bool = False

    def notify(self, event: AlarmEvent) -> None:
        self.alarms.append(event)

    def chime(self) -> None:
        self.chimes += 1

    def shutdown(self) -> None:
        self.closed = True


class FailingNotifier(RecordingNotifier):
    """Records the alarm, then fails like a broken sound device."""

    def notify(self, event: AlarmEvent) -> None:
        self.alarms.append(event)
        raise RuntimeError("audio device unavailable")
