# src/todo_alarm/logging_setup.py

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from pathlib import Path

# Minimum level for a todo_alarm logger to reach the console (longest prefix wins).
# The REPL echoes every mutation and prints a banner for every alarm, so the
# task subsystem only shows problems there; the log file keeps everything.
CONSOLE_LEVELS: dict[str, int] = {
    "todo_alarm": logging.INFO,
    "todo_alarm.tasks": logging.WARNING,
    "todo_alarm.alerts": logging.WARNING,
}


class _ConsoleNoiseFilter(logging.Filter):
    """
    Per-logger console thresholds for todo_alarm; anything else (third-party,
    captured 'py.warnings') only at ERROR+.
    """

    def __init__(self, levels: Mapping[str, int] | None = None) -> None:
        super().__init__()
        self._levels = dict(CONSOLE_LEVELS if levels is None else levels)

    def threshold(self, name: str) -> int:
        best = ""
        for prefix in self._levels:
            if (name == prefix or name.startswith(prefix + ".")) and len(prefix) > len(best):
                best = prefix
        return self._levels[best] if best else logging.ERROR

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.threshold(record.name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/todo",
    log_name: str = "todo",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Console: filtered for the REPL. File (<log_dir>/<log_name>.log): full history,
    including every tick decision and every alarm.

    Call this ONCE, before the first log line. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{log_name}.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
