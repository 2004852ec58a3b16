# src/todo_alarm/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL and the
alarm scheduler on one asyncio event loop.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import print_ts_block, run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.notifier.shutdown()
    except Exception:
        logger.debug("Notifier shutdown failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/todo")
    log_file = setup_logging(
        log_dir=log_dir,
        log_name=str(getattr(settings, "app_name", "todo")),
        console_level=console_level,
    )

    logger.info("Starting %s (log file %s)...", getattr(settings, "app_name", "todo"), log_file)

    state = create_initial_state(settings=settings, emit=print_ts_block)

    try:
        asyncio.run(run_console_loop(state))
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt, shutting down...")
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
