# src/todo_alarm/alerts/notifier.py

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Any

from ..core.ports import Emitter
from ..tasks.task_api import format_alarm
from ..tasks.task_models import AlarmEvent

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100


@dataclass(frozen=True)
class ToneConfig:
    """Runtime tone config resolved from settings."""
    alarm_hz: int
    alarm_seconds: float
    chime_hz: int = 1320
    chime_seconds: float = 0.12


def _resolve_tone_config(settings: object | None) -> ToneConfig:
    return ToneConfig(
        alarm_hz=int(getattr(settings, "alarm_tone_hz", 880) or 880),
        alarm_seconds=float(getattr(settings, "alarm_tone_seconds", 1.5) or 1.5),
    )


class AlarmNotifier:
    """
    Best-effort alarm delivery.

    - notify(): prints a "Task Due!" banner through the emitter and queues the alarm tone
    - chime(): short confirmation tone after a mutation (only if chime is enabled)

    Design goals:
    - Optional audio (does not crash if sounddevice/PortAudio is unavailable).
    - Never blocks the caller: tones are synthesized and played in a worker thread.
    """

    def __init__(
            self,
            emit: Emitter | None = None,
            *,
            sound_enabled: bool = False,
            chime_enabled: bool = False,
            settings: object | None = None,
    ) -> None:
        self._emit = emit
        self.sound_enabled = bool(sound_enabled)
        self.chime_enabled = bool(chime_enabled) and self.sound_enabled
        self._cfg = _resolve_tone_config(settings)

        self._queue: queue.Queue[tuple[int, float] | None] | None = None
        self._worker: threading.Thread | None = None
        self._sd: Any = None
        self._np: Any = None
        self._stop_requested = False

        if not self.sound_enabled:
            logger.info("Alarm sound disabled.")
            return

        # Lazy / optional imports: PortAudio may be missing on headless machines.
        try:
            import numpy as np
            import sounddevice as sd
        except Exception as e:
            self.sound_enabled = False
            self.chime_enabled = False
            logger.warning(
                "Alarm sound is enabled, but sounddevice failed to import "
                "(is PortAudio installed?). Error: %s",
                repr(e),
            )
            return

        self._np = np
        self._sd = sd
        self._queue = queue.Queue()
        self._worker = threading.Thread(target=self._audio_worker, daemon=True)
        self._worker.start()
        logger.info("Alarm sound ready (tone=%sHz).", self._cfg.alarm_hz)

    def _tone(self, hz: int, seconds: float) -> Any:
        np = self._np
        t = np.linspace(0.0, seconds, int(SAMPLE_RATE * seconds), endpoint=False)
        wave = 0.3 * np.sin(2 * np.pi * hz * t)
        # Pulse on/off four times per second so it reads as an alarm.
        gate = (np.floor(t * 8) % 2 == 0).astype(np.float32)
        return (wave * gate).astype(np.float32)

    def _audio_worker(self) -> None:
        logger.info("Alarm sound worker started.")
        assert self._queue is not None

        while True:
            item = self._queue.get()
            try:
                if item is None:
                    logger.info("Alarm sound worker received stop signal.")
                    return

                hz, seconds = item
                try:
                    self._sd.play(self._tone(hz, seconds), SAMPLE_RATE)
                    self._sd.wait()
                except Exception as e:
                    logger.error("Alarm playback failed: %s", repr(e))
            finally:
                self._queue.task_done()

    def _play(self, hz: int, seconds: float) -> None:
        if not self.sound_enabled or self._queue is None or self._stop_requested:
            return
        self._queue.put((hz, seconds))

    def notify(self, event: AlarmEvent) -> None:
        """on_alarm subscriber: show the banner, then queue the tone."""
        if self._emit is not None:
            self._emit(format_alarm(event))
        self._play(self._cfg.alarm_hz, self._cfg.alarm_seconds)

    def chime(self) -> None:
        if self.chime_enabled:
            self._play(self._cfg.chime_hz, self._cfg.chime_seconds)

    def shutdown(self) -> None:
        """Request a clean shutdown of the worker (no-op if sound is disabled)."""
        if not self.sound_enabled or self._queue is None:
            return
        if self._stop_requested:
            return
        self._stop_requested = True

        logger.info("Stopping alarm sound worker...")
        self._queue.put(None)

        if self._worker is not None:
            self._worker.join(timeout=5.0)

        logger.info("Alarm sound stopped.")
