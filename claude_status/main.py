"""Entry point for the `claude-status` status line command."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.text import Text

from claude_status import __version__
from claude_status.config import settings
from claude_status.panels.style import warning
from claude_status.render import build_lines
from claude_status.runtime import StatusRuntime
from claude_status.session import parse_session

logger = logging.getLogger(__name__)

console = Console(
    force_terminal=True,
    color_system="256",
    highlight=False,
    soft_wrap=True,
    emoji=False,
    markup=False,
)


async def render_status(raw: str, runtime: StatusRuntime, ttl: float | None = None) -> list[Text]:
    """Turn the stdin document into status lines; a lone glyph on bad input."""
    session = parse_session(raw)
    if session is None:
        return [warning()]

    usage, log = await runtime.collect(session, ttl)
    return build_lines(session, usage, log)


def build_runtime() -> StatusRuntime:
    return StatusRuntime(settings)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="claude-status",
        description="Claude Code status line (reads the session JSON from stdin)",
    )
    parser.add_argument(
        "--ttl",
        type=float,
        default=None,
        help=f"Seconds usage data stays fresh (default: {settings.usage_ttl})",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    try:
        raw = sys.stdin.read()
        lines = asyncio.run(render_status(raw, build_runtime(), args.ttl))
    except Exception:
        logger.debug("Status line failed", exc_info=True)
        lines = [warning()]

    for line in lines:
        console.print(line)


if __name__ == "__main__":
    main()
