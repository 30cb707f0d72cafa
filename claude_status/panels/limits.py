"""Rate limit panels: 5-hour session window and 7-day windows."""

from __future__ import annotations

from rich.text import Text

from claude_status.panels.format import fmt_remaining
from claude_status.panels.style import threshold_style, warning
from claude_status.usage.models import UsageSnapshot, UsageWindow


def _limit(label: str, window: UsageWindow | None) -> Text:
    if window is None:
        return warning()
    text = Text.assemble(f"{label}: ", (f"{window.percent}%", threshold_style(window.percent)))
    if window.reset_time is not None:
        text.append(f" ({fmt_remaining(window.reset_time)})")
    return text


def five_hour_panel(usage: UsageSnapshot | None) -> Text:
    """Always shown; a warning glyph stands in when usage is unavailable."""
    return _limit("5h", usage.five_hour if usage else None)


def seven_day_panel(usage: UsageSnapshot | None) -> Text | None:
    if not usage or not usage.seven_day:
        return None
    return _limit("7d", usage.seven_day)


def seven_day_sonnet_panel(usage: UsageSnapshot | None) -> Text | None:
    if not usage or not usage.seven_day_sonnet:
        return None
    return _limit("7d-S", usage.seven_day_sonnet)
