"""Two-line status bar for Claude Code: model, context, cost, rate limits and session activity."""

__version__ = "1.0.0"
