# tests/test_commands.py

from __future__ import annotations

from datetime import datetime

from todo_alarm.cli.commands import CommandRegistry, registry
from todo_alarm.tasks.task_models import TaskCategory, TaskView


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=lambda _: None) == "h3"
    assert called["h2"] == 1
    assert called["h3"] == 1


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_add_with_category_and_due_time(state) -> None:
    reply = registry.handle(state, "/add important Call dentist @14:00")

    assert reply == "Added #1 (important), due 2:00 PM."
    task = state.store.get_task(1)
    assert task.text == "Call dentist"
    assert task.category is TaskCategory.IMPORTANT
    assert task.due_time == datetime(2024, 5, 14, 14, 0)
    assert state.notifier.chimes == 1


def test_add_uses_active_view_then_default_category(state) -> None:
    registry.handle(state, "/add Buy milk")
    state.active_view = TaskView.ROUTINE
    registry.handle(state, "/add Stretch")

    cats = [t.category for t in state.store.snapshot()]
    assert cats == [TaskCategory.BASIC, TaskCategory.ROUTINE]


def test_add_blank_text_is_declined(state) -> None:
    reply = registry.handle(state, "/add")
    assert reply is not None and reply.startswith("Usage")
    assert len(state.store) == 0
    assert state.notifier.chimes == 0


def test_add_reports_invalid_due_time(state) -> None:
    reply = registry.handle(state, "/add basic Nap @later")
    assert "Ignored invalid due time 'later'" in (reply or "")
    assert state.store.get_task(1).due_time is None


def test_add_warns_when_due_time_already_passed(state) -> None:
    notes: list[str] = []
    registry.handle(state, "/add Breakfast @08:00", emit=notes.append)
    assert notes == ["Note: 8:00 AM has already passed today."]


def test_done_toggles_and_reports_not_found(state) -> None:
    registry.handle(state, "/add Read")

    assert registry.handle(state, "/done 1") == "Task #1 completed."
    assert registry.handle(state, "/done #1") == "Task #1 reopened."
    assert registry.handle(state, "/done 9") == "Task #9 not found."
    assert registry.handle(state, "/done x") == "Usage: /done <id>"


def test_rm_deletes_and_reports_not_found(state) -> None:
    registry.handle(state, "/add Read")

    assert registry.handle(state, "/rm 1") == "Task #1 deleted."
    assert registry.handle(state, "/del 1") == "Task #1 not found."
    assert len(state.store) == 0


def test_list_and_view(state) -> None:
    registry.handle(state, "/add basic Buy milk")
    registry.handle(state, "/add important Call dentist @14:00")

    listing = registry.handle(state, "/list important") or ""
    assert listing.splitlines() == [
        "Important Tasks:",
        "  [ ] #2 * Call dentist  (Due: 2:00 PM)",
    ]
    assert state.active_view is TaskView.ALL

    listing = registry.handle(state, "/view routine") or ""
    assert listing.splitlines() == ["Routine Tasks:", "  (no tasks)"]
    assert state.active_view is TaskView.ROUTINE

    assert (registry.handle(state, "/view urgent") or "").startswith("Views:")


def test_status_counts_pending_alarms(state, clock) -> None:
    registry.handle(state, "/add Call dentist @14:00")
    registry.handle(state, "/add Read")

    status = registry.handle(state, "/status") or ""
    assert "Tasks: 2 (2 open)" in status
    assert "Pending alarms: 1" in status

    clock.set(datetime(2024, 5, 14, 14, 0, 1))
    state.scheduler.tick()

    status = registry.handle(state, "/status") or ""
    assert "Pending alarms: 0" in status
    assert [e.task_id for e in state.notifier.alarms] == [1]


def test_help_lists_commands(state) -> None:
    text = registry.handle(state, "/help") or ""
    for name in ("add", "done", "rm", "list", "view", "status"):
        assert f"/{name}" in text
