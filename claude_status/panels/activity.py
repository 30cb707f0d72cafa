"""Panels derived from the transcript: running tools, sub-agents, todo list.

Each returns None when there is no transcript, so the panel is omitted.
"""

from __future__ import annotations

from rich.text import Text

from claude_status.panels.style import CYAN, DIM, SOFT_GREEN, YELLOW, threshold_style
from claude_status.transcript.reader import (
    ParsedLog,
    active_tools,
    agent_status,
    done_count,
    todo_progress,
)

AGENT_NAME_MAX = 20
TODO_TASK_MAX = 15


def _truncate(s: str, limit: int) -> str:
    return s[:limit] + "..." if len(s) > limit else s


def tools_panel(log: ParsedLog | None) -> Text | None:
    if log is None:
        return None

    active = active_tools(log)
    done = done_count(log)
    if not active:
        return Text(f"Tools: {done} done", style=DIM)

    names = ", ".join(t.name for t in active[:2])
    more = f" +{len(active) - 2}" if len(active) > 2 else ""
    return Text.assemble(("⚙️", YELLOW), f" {names}{more} ({done} done)")


def agents_panel(log: ParsedLog | None) -> Text | None:
    if log is None:
        return None

    status = agent_status(log)
    if not status.running and status.done == 0:
        return None
    if not status.running:
        return Text(f"Agent: {status.done} done", style=DIM)

    name = _truncate(status.running[0], AGENT_NAME_MAX)
    more = f" +{len(status.running) - 1}" if len(status.running) > 1 else ""
    return Text.assemble(("\U0001f916", CYAN), f" Agent: {name}{more}")


def todos_panel(log: ParsedLog | None) -> Text | None:
    if log is None:
        return None

    progress = todo_progress(log)
    if progress is None or progress.total == 0:
        return Text("Todos: -", style=DIM)

    done, total = progress.done, progress.total
    if progress.current:
        task = _truncate(progress.current, TODO_TASK_MAX)
        return Text.assemble(("✓", SOFT_GREEN), f" {task} [{done}/{total}]")

    percent = int(done / total * 100 + 0.5)
    style = SOFT_GREEN if done == total else threshold_style(100 - percent)
    return Text(f"Todos: {done}/{total}", style=style)
