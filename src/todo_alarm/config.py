# src/todo_alarm/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every value has a usable default; bad values fall back to the default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


# Local .env for development; variables already in the environment win.
load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Scheduler ----
    tick_interval_seconds: float

    # ---- Tasks ----
    default_category: str

    # ---- Alerts ----
    sound_enabled: bool
    alarm_tone_hz: int
    alarm_tone_seconds: float
    chime_enabled: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo").strip() or "todo"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo"))

        tick_interval_seconds = _env_float(_k("TICK_INTERVAL_SECONDS"), 1.0)
        if tick_interval_seconds <= 0:
            tick_interval_seconds = 1.0

        default_category = _env(_k("DEFAULT_CATEGORY"), "basic").strip().lower()
        if default_category not in {"routine", "important", "basic"}:
            default_category = "basic"

        sound_enabled = _env_bool(_k("SOUND_ENABLED"), False)
        alarm_tone_hz = _env_int(_k("ALARM_TONE_HZ"), 880)
        alarm_tone_seconds = _env_float(_k("ALARM_TONE_SECONDS"), 1.5)
        # Short confirmation tone after add/toggle/delete.
        chime_enabled = _env_bool(_k("CHIME_ENABLED"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tick_interval_seconds=tick_interval_seconds,
            default_category=default_category,
            sound_enabled=sound_enabled,
            alarm_tone_hz=alarm_tone_hz,
            alarm_tone_seconds=alarm_tone_seconds,
            chime_enabled=chime_enabled,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
