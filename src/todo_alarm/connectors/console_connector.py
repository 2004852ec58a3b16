# src/todo_alarm/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from datetime import datetime

from ..cli.commands import add_plain_text
from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_api import render_task_list
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def print_ts_block(text: str) -> None:
    ts = _ts_local()
    lines = text.splitlines() or [""]
    for i, line in enumerate(lines):
        # keep nice alignment for multi-line output
        prefix = f"[{ts}] " if i == 0 else " " * (len(ts) + 3)
        print(prefix + line, flush=True)


def _start_stdin_reader(loop: asyncio.AbstractEventLoop, lines: asyncio.Queue[str | None]) -> None:
    """
    Read stdin in a daemon thread and hand each line to the event loop.

    input() blocks, so it cannot run on the loop thread; everything else
    (commands, scheduler ticks) stays on the loop. None signals EOF.
    """

    def _reader() -> None:
        while True:
            try:
                line: str | None = input()
            except EOFError:
                line = None
            except Exception:
                logger.exception("stdin reader crashed")
                line = None

            with contextlib.suppress(RuntimeError):
                # Loop already closed: nobody is listening anymore.
                loop.call_soon_threadsafe(lines.put_nowait, line)
            if line is None:
                return

    threading.Thread(target=_reader, name="stdin-reader", daemon=True).start()


async def run_console_loop(state: AppState, lines: asyncio.Queue[str | None] | None = None) -> None:
    """
    Interactive REPL.

    Lines starting with "/" are commands; any other line adds a task to the
    active list. The alarm scheduler runs on the same event loop.
    """
    if lines is None:
        lines = asyncio.Queue()
        _start_stdin_reader(asyncio.get_running_loop(), lines)

    changed = False

    def _on_state_changed(_tasks: tuple[Task, ...]) -> None:
        nonlocal changed
        changed = True

    unsubscribe = state.store.subscribe(_on_state_changed)
    state.scheduler.start()

    logger.info("Console connector started (view=%s).", state.active_view.value)
    print_ts_block(
        "[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit."
    )

    try:
        while True:
            raw = await lines.get()
            if raw is None:
                logger.info("Console EOF received, exiting.")
                break

            user_input = raw.strip()
            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            changed = False
            try:
                if user_input.startswith("/"):
                    reply = command_registry.handle(state, user_input, emit=print_ts_block)
                else:
                    reply = add_plain_text(state, user_input, print_ts_block)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply is not None:
                print_ts_block(reply)

            if changed:
                view = state.active_view
                print_ts_block(render_task_list(view, state.store.filter_by_category(view)))
    finally:
        unsubscribe()
        await state.scheduler.aclose()
        logger.info("Console connector finished.")
