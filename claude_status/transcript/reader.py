"""Read the Claude Code session transcript that drives the activity panels.

The transcript is a JSONL file that grows while the session runs. The status
bar is repainted far more often than the file changes, so the last parse is
kept and reused until the file's modification time moves.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

TODO_TOOL = "TodoWrite"
AGENT_TOOL = "Task"
AGENT_LABEL_MAX = 20


@dataclass
class TranscriptEntry:
    """One JSON record from the transcript."""

    role: str | None
    timestamp: str | None
    blocks: list[dict[str, Any]]
    raw: dict[str, Any]

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> TranscriptEntry:
        message = record.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        blocks = [b for b in content if isinstance(b, dict)] if isinstance(content, list) else []
        ts = record.get("timestamp")
        return cls(
            role=record.get("type"),
            timestamp=ts if isinstance(ts, str) else None,
            blocks=blocks,
            raw=record,
        )


@dataclass
class ToolCall:
    """A ``tool_use`` block issued by the assistant."""

    id: str
    name: str
    invoked_at: datetime | None
    input: Any = None


@dataclass
class ParsedLog:
    """A fully parsed transcript with tool calls correlated to results."""

    entries: list[TranscriptEntry] = field(default_factory=list)
    tool_calls: dict[str, ToolCall] = field(default_factory=dict)
    tool_done: set[str] = field(default_factory=set)
    start_time: datetime | None = None


@dataclass
class ActiveTool:
    name: str
    since: datetime


@dataclass
class TodoProgress:
    current: str | None
    done: int
    total: int


@dataclass
class AgentStatus:
    running: list[str] = field(default_factory=list)
    done: int = 0


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp, returning None when it is unusable."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def _parse_jsonl(text: str) -> list[TranscriptEntry]:
    """Parse JSONL text, skipping blank, malformed and non-object lines."""
    entries: list[TranscriptEntry] = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(record, dict):
            entries.append(TranscriptEntry.from_record(record))
    return entries


def parse_log(entries: list[TranscriptEntry]) -> ParsedLog:
    """Index tool calls and tool results across the entries."""
    log = ParsedLog(entries=entries)

    for entry in entries:
        if log.start_time is None:
            log.start_time = parse_timestamp(entry.timestamp)

        if entry.role == "assistant":
            for block in entry.blocks:
                if block.get("type") != "tool_use":
                    continue
                call_id, name = block.get("id"), block.get("name")
                # ids and names from the file are only trusted as non-empty strings
                if isinstance(call_id, str) and call_id and isinstance(name, str) and name:
                    log.tool_calls[call_id] = ToolCall(
                        id=call_id,
                        name=name,
                        invoked_at=parse_timestamp(entry.timestamp),
                        input=block.get("input"),
                    )

        elif entry.role == "user":
            for block in entry.blocks:
                result_id = block.get("tool_use_id")
                if block.get("type") == "tool_result" and isinstance(result_id, str) and result_id:
                    log.tool_done.add(result_id)

    return log


class TranscriptReader:
    """Reads transcripts, caching the most recently read file."""

    def __init__(self) -> None:
        self._cached: tuple[Path, int, ParsedLog] | None = None

    def read(self, path: str | Path) -> ParsedLog | None:
        """Return the parsed transcript at ``path``, or None if unreadable.

        An unchanged file (same path and mtime) returns the cached object
        itself. Reading a different path replaces the cached one.
        """
        path = Path(path)
        try:
            mtime_ns = path.stat().st_mtime_ns
            if self._cached and self._cached[0] == path and self._cached[1] == mtime_ns:
                return self._cached[2]

            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug("Could not read transcript %s: %s", path, e)
            return None

        log = parse_log(_parse_jsonl(text))
        self._cached = (path, mtime_ns, log)
        return log


# -- Derived queries -----------------------------------------------------------


def active_tools(log: ParsedLog, now: datetime | None = None) -> list[ActiveTool]:
    """Tool calls with no matching result yet, in invocation order."""
    now = now or datetime.now(timezone.utc)
    return [
        ActiveTool(name=call.name, since=call.invoked_at or now)
        for call_id, call in log.tool_calls.items()
        if call_id not in log.tool_done
    ]


def done_count(log: ParsedLog) -> int:
    return len(log.tool_done)


def todo_progress(log: ParsedLog) -> TodoProgress | None:
    """Progress of the todo list as of the last completed TodoWrite call."""
    last: Any = None
    for call_id, call in log.tool_calls.items():
        if call.name == TODO_TOOL and call_id in log.tool_done:
            last = call.input

    if not isinstance(last, dict):
        return None
    todos = last.get("todos")
    if not isinstance(todos, list):
        return None

    items = [t for t in todos if isinstance(t, dict)]
    done = sum(1 for t in items if t.get("status") == "completed")
    current = next(
        (t.get("content") for t in items if t.get("status") in ("in_progress", "pending")),
        None,
    )
    return TodoProgress(
        current=current if isinstance(current, str) else None,
        done=done,
        total=len(todos),
    )


def agent_status(log: ParsedLog) -> AgentStatus:
    """Sub-agent (Task) calls split into running labels and a done count."""
    status = AgentStatus()
    for call_id, call in log.tool_calls.items():
        if call.name != AGENT_TOOL:
            continue
        if call_id in log.tool_done:
            status.done += 1
            continue
        inp = call.input if isinstance(call.input, dict) else {}
        description = inp.get("description")
        subagent = inp.get("subagent_type")
        if isinstance(description, str) and description:
            label = description[:AGENT_LABEL_MAX]
        elif isinstance(subagent, str) and subagent:
            label = subagent
        else:
            label = "Agent"
        status.running.append(label)
    return status
