"""Assemble panels into the two status lines."""

from __future__ import annotations

from rich.text import Text

from claude_status.panels import (
    agents_panel,
    cache_panel,
    context_panel,
    cost_panel,
    five_hour_panel,
    model_panel,
    seven_day_panel,
    seven_day_sonnet_panel,
    todos_panel,
    tools_panel,
)
from claude_status.panels.style import separator
from claude_status.session import SessionInput
from claude_status.transcript.reader import ParsedLog
from claude_status.usage.models import UsageSnapshot


def _join(panels: list[Text | None]) -> Text:
    return separator().join(p for p in panels if p is not None)


def build_lines(
    session: SessionInput,
    usage: UsageSnapshot | None,
    log: ParsedLog | None,
) -> list[Text]:
    """Line 1: model, context, cost, limits. Line 2: activity and cache."""
    line1 = _join(
        [
            model_panel(session),
            context_panel(session),
            cost_panel(session),
            five_hour_panel(usage),
            seven_day_panel(usage),
            seven_day_sonnet_panel(usage),
        ]
    )
    line2 = _join(
        [
            tools_panel(log),
            agents_panel(log),
            todos_panel(log),
            cache_panel(session),
        ]
    )
    return [line1, line2]
