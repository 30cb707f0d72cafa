"""Panels derived from the stdin session snapshot: model, context, cost, cache."""

from __future__ import annotations

from rich.text import Text

from claude_status.panels.format import fmt_cost, fmt_tokens, pct, short_model
from claude_status.panels.style import (
    SOFT_CYAN,
    SOFT_GREEN,
    SOFT_YELLOW,
    bar,
    separator,
    threshold_style,
)
from claude_status.session import SessionInput


def model_panel(session: SessionInput) -> Text:
    name = session.model.display_name or "-"
    return Text(f"\U0001f916 {short_model(name)}", style=SOFT_CYAN)


def context_panel(session: SessionInput) -> Text:
    """Context window fill: bar, percent and used/size tokens."""
    window = session.context_window
    size = window.size
    usage = window.current_usage

    if usage is None:
        return Text.assemble(bar(0), " ", ("0%", SOFT_GREEN), f" 0/{fmt_tokens(size)}")

    used = usage.context_tokens
    percent = pct(used, size)
    return separator().join(
        [
            bar(percent),
            Text(f"{percent}%", style=threshold_style(percent)),
            Text(f"{fmt_tokens(used)}/{fmt_tokens(size)}"),
        ]
    )


def cost_panel(session: SessionInput) -> Text:
    return Text(fmt_cost(session.cost.total_cost_usd or 0), style=SOFT_YELLOW)


def cache_panel(session: SessionInput) -> Text:
    """Prompt cache hit rate for the last request; higher is better."""
    usage = session.context_window.current_usage
    total = usage.context_tokens if usage else 0
    if not usage or total == 0:
        return Text.assemble("\U0001f4e6 ", ("0%", threshold_style(100)))

    hit = max(0, min(100, int(usage.cache_read_input_tokens / total * 100 + 0.5)))
    return Text.assemble("\U0001f4e6 ", (f"{hit}%", threshold_style(100 - hit)))
