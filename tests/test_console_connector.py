# tests/test_console_connector.py

from __future__ import annotations

import asyncio
from datetime import datetime

import pytest

from todo_alarm.connectors.console_connector import run_console_loop
from todo_alarm.tasks.task_models import TaskCategory, TaskView


async def _feed(*lines: str | None) -> asyncio.Queue[str | None]:
    q: asyncio.Queue[str | None] = asyncio.Queue()
    for line in lines:
        q.put_nowait(line)
    return q


@pytest.mark.asyncio
async def test_console_adds_plain_text_and_rerenders(state, capsys) -> None:
    lines = await _feed("Buy milk", "/add important Call dentist @14:00", "/exit")

    await run_console_loop(state, lines)

    out = capsys.readouterr().out
    assert "Added #1 (basic)." in out
    assert "Added #2 (important), due 2:00 PM." in out
    assert "[ ] #2 * Call dentist  (Due: 2:00 PM)" in out
    assert [t.text for t in state.store.snapshot()] == ["Buy milk", "Call dentist"]
    assert not state.scheduler.running


@pytest.mark.asyncio
async def test_console_does_not_rerender_on_reads(state, capsys) -> None:
    lines = await _feed("/list", "/done 3", None)

    await run_console_loop(state, lines)

    out = capsys.readouterr().out
    assert out.count("All Tasks:") == 1
    assert "Task #3 not found." in out


@pytest.mark.asyncio
async def test_console_runs_the_scheduler_while_waiting_for_input(state, clock) -> None:
    state.store.add_task("Call dentist", "important", "14:00")
    clock.set(datetime(2024, 5, 14, 14, 0, 1))
    lines: asyncio.Queue[str | None] = asyncio.Queue()

    console = asyncio.create_task(run_console_loop(state, lines))
    await asyncio.sleep(0.1)
    lines.put_nowait("/quit")
    await console

    assert [e.text for e in state.notifier.alarms] == ["Call dentist"]
    assert state.scheduler.alarmed_ids == frozenset()


@pytest.mark.asyncio
async def test_console_plain_text_keeps_leading_category_word(state) -> None:
    state.active_view = TaskView.ROUTINE
    lines = await _feed("Important meeting with boss @14:00", "/exit")

    await run_console_loop(state, lines)

    (task,) = state.store.snapshot()
    assert task.text == "Important meeting with boss @14:00"
    assert task.category is TaskCategory.ROUTINE
    assert task.due_time is None
