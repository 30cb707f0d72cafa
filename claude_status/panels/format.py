"""Number, cost and time formatting for panel text."""

from __future__ import annotations

from datetime import datetime, timezone


def _round_half_up(v: float) -> int:
    return int(v + 0.5)


def fmt_tokens(n: int) -> str:
    """Format a token count: 1500 -> "1.5K", 150000 -> "150K", 15000000 -> "15M"."""
    if n >= 1_000_000:
        v = n / 1_000_000
        return f"{_round_half_up(v)}M" if v >= 10 else f"{v:.1f}M"
    if n >= 1_000:
        v = n / 1_000
        return f"{_round_half_up(v)}K" if v >= 10 else f"{v:.1f}K"
    return str(n)


def fmt_cost(usd: float) -> str:
    return f"${usd:.2f}"


def pct(current: float, total: float) -> int:
    if total <= 0:
        return 0
    return min(100, _round_half_up(current / total * 100))


def fmt_remaining(reset: datetime | None, now: datetime | None = None) -> str:
    """Time until ``reset``: "2d3h", "2h30m", "45m", or "0m" once passed."""
    if reset is None:
        return ""
    now = now or datetime.now(timezone.utc)
    if reset.tzinfo is None:
        reset = reset.replace(tzinfo=timezone.utc)
    diff = (reset - now).total_seconds()
    if diff <= 0:
        return "0m"

    mins = int(diff // 60)
    hrs = mins // 60
    days = hrs // 24
    if days > 0:
        return f"{days}d{hrs % 24}h"
    if hrs > 0:
        return f"{hrs}h{mins % 60}m"
    return f"{mins}m"


def short_model(name: str) -> str:
    """Shorten a display name to its family: "Claude 3.5 Sonnet" -> "Sonnet"."""
    lower = name.lower()
    for family in ("Opus", "Sonnet", "Haiku"):
        if family.lower() in lower:
            return family
    parts = name.split()
    return parts[-1] if parts else name
