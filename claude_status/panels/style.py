"""Terminal styles shared by the panels (xterm-256 colors via rich)."""

from __future__ import annotations

from rich.style import Style
from rich.text import Text

DIM = Style(dim=True)
YELLOW = Style(color="yellow")
CYAN = Style(color="cyan")
SOFT_CYAN = Style(color="color(117)")
SOFT_YELLOW = Style(color="color(222)")
SOFT_GREEN = Style(color="color(151)")
SOFT_RED = Style(color="color(210)")

BAR_WIDTH = 10
BAR_FILLED = "█"
BAR_EMPTY = "░"
WARNING = "⚠️"


def threshold_style(pct: float) -> Style:
    """Green up to 50%, yellow up to 80%, red above."""
    if pct <= 50:
        return SOFT_GREEN
    if pct <= 80:
        return SOFT_YELLOW
    return SOFT_RED


def bar(pct: float, width: int = BAR_WIDTH) -> Text:
    clamped = max(0.0, min(100.0, pct))
    filled = int(clamped / 100 * width + 0.5)
    return Text(BAR_FILLED * filled + BAR_EMPTY * (width - filled), style=threshold_style(clamped))


def separator() -> Text:
    return Text.assemble(" ", ("│", DIM), " ")


def warning() -> Text:
    return Text(WARNING, style=YELLOW)
