# src/todo_alarm/tasks/task_api.py

"""Text rendering helpers shared by the console connector, commands and alerts."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .task_models import AlarmEvent, Task, TaskCategory, TaskView

CATEGORY_MARKS: dict[TaskCategory, str] = {
    TaskCategory.IMPORTANT: "*",
    TaskCategory.ROUTINE: "~",
    TaskCategory.BASIC: "o",
}


def format_due_time(due: datetime) -> str:
    """12-hour clock without leading zero: 2:00 PM, 12:05 AM."""
    return due.strftime("%I:%M %p").lstrip("0")


def format_task_line(task: Task) -> str:
    box = "[x]" if task.completed else "[ ]"
    line = f"{box} #{task.id} {CATEGORY_MARKS[task.category]} {task.text}"
    if task.due_time is not None:
        line += f"  (Due: {format_due_time(task.due_time)})"
    return line


def render_task_list(view: TaskView, tasks: Iterable[Task]) -> str:
    lines = [f"{view.heading}:"]
    items = [format_task_line(t) for t in tasks]
    if not items:
        lines.append("  (no tasks)")
    lines.extend(f"  {item}" for item in items)
    return "\n".join(lines)


def format_alarm(event: AlarmEvent) -> str:
    lines = [
        "Task Due!",
        "  The following task is now due:",
        f"  {event.text}",
    ]
    if event.due_time is not None:
        lines.append(f"  Due time: {format_due_time(event.due_time)}")
    return "\n".join(lines)
