# src/todo_alarm/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_api import format_due_time, render_task_list
from ..tasks.task_models import TaskCategory, TaskView

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_task_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        return None


def _resolve_category(state: AppState, explicit: TaskCategory | None) -> TaskCategory:
    """Explicit argument, else the list being viewed, else the configured default."""
    if explicit is not None:
        return explicit
    if state.active_view.category is not None:
        return state.active_view.category
    default = TaskCategory.parse(getattr(state.settings, "default_category", None))
    return default or TaskCategory.BASIC


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def _add(
    state: AppState,
    text: str,
    category: TaskCategory,
    due_raw: str | None,
    emit: CommandEmitter | None,
) -> str | None:
    task_id = state.store.add_task(text, category, due_raw)
    if task_id is None:
        return None

    state.notifier.chime()
    task = state.store.get_task(task_id)
    reply = f"Added #{task_id} ({category.value})"
    if task is not None and task.due_time is not None:
        reply += f", due {format_due_time(task.due_time)}"
        if emit is not None and task.due_time <= task.created_at:
            # Due times are always today; an earlier time is already due.
            emit(f"Note: {format_due_time(task.due_time)} has already passed today.")
    elif due_raw is not None:
        reply += f". Ignored invalid due time {due_raw!r} (expected HH:MM)"
    return reply + "."


def add_plain_text(state: AppState, line: str, emit: CommandEmitter | None = None) -> str | None:
    """Add `line` verbatim to the list being viewed (no keyword or due-time parsing)."""
    return _add(state, line, _resolve_category(state, None), None, emit)


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add [routine|important|basic] text... [@HH:MM]
    """
    words = list(args)

    explicit = TaskCategory.parse(words[0]) if len(words) > 1 else None
    if explicit is not None:
        words = words[1:]

    due_raw: str | None = None
    if words and words[-1].startswith("@"):
        due_raw = words.pop()[1:]

    category = _resolve_category(state, explicit)
    reply = _add(state, " ".join(words), category, due_raw, emit)
    if reply is None:
        return "Usage: /add [routine|important|basic] text [@HH:MM]"
    return reply


def cmd_done(state: AppState, args: list[str]) -> str:
    """
    /done <id> -> toggle completion (run again to reopen)
    """
    task_id = _parse_task_id(args)
    if task_id is None:
        return "Usage: /done <id>"
    if not state.store.toggle_completion(task_id):
        return f"Task #{task_id} not found."

    state.notifier.chime()
    task = state.store.get_task(task_id)
    status = "completed" if task is not None and task.completed else "reopened"
    return f"Task #{task_id} {status}."


def cmd_rm(state: AppState, args: list[str]) -> str:
    task_id = _parse_task_id(args)
    if task_id is None:
        return "Usage: /rm <id>"
    if not state.store.delete_task(task_id):
        return f"Task #{task_id} not found."

    state.notifier.chime()
    return f"Task #{task_id} deleted."


def _view_usage() -> str:
    return "Views: " + ", ".join(v.value for v in TaskView)


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list        -> show the active view
    /list <view> -> show another view without switching
    """
    view = TaskView.parse(args[0]) if args else state.active_view
    if view is None:
        return _view_usage()
    return render_task_list(view, state.store.filter_by_category(view))


def cmd_view(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Active view: {state.active_view.value}. {_view_usage()}"
    view = TaskView.parse(args[0])
    if view is None:
        return _view_usage()

    state.active_view = view
    logger.debug("Active view -> %s", view.value)
    return render_task_list(view, state.store.filter_by_category(view))


def cmd_status(state: AppState, args: list[str]) -> str:
    tasks = state.store.snapshot()
    open_count = sum(1 for t in tasks if not t.completed)
    pending_alarms = sum(
        1
        for t in tasks
        if t.due_time is not None and not t.completed and t.id not in state.scheduler.alarmed_ids
    )
    sound = "ON" if getattr(state.notifier, "sound_enabled", False) else "OFF"
    return (
        "Status:\n"
        f"  Tasks: {len(tasks)} ({open_count} open)\n"
        f"  Pending alarms: {pending_alarms}\n"
        f"  Active view: {state.active_view.value}\n"
        f"  Check interval: {state.scheduler.interval_seconds:g}s\n"
        f"  Alarm sound: {sound}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add", cmd_add, help_text="Add a task: /add [routine|important|basic] text [@HH:MM]."
)
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["del", "delete"])
registry.register("list", cmd_list, help_text="Show tasks: /list [all|routine|important|basic].")
registry.register("view", cmd_view, help_text="Switch list: /view all|routine|important|basic.")
registry.register("status", cmd_status, help_text="Show task and alarm counters.")
