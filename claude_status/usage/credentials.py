"""OAuth token lookup: macOS keychain first, then ~/.claude/.credentials.json.

Both sources share one cache slot. The keychain path keeps its token for a
short TTL; the file path keeps its token until the file's mtime changes.
"""

from __future__ import annotations

import asyncio
import json
import logging
import subprocess
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from claude_status.config import settings

logger = logging.getLogger(__name__)

_KEYCHAIN_TIMEOUT = 5  # seconds


def _extract_token(raw: str) -> str | None:
    data: Any = json.loads(raw)
    if not isinstance(data, dict):
        return None
    oauth = data.get("claudeAiOauth")
    if not isinstance(oauth, dict):
        return None
    token = oauth.get("accessToken")
    return token if isinstance(token, str) and token else None


@dataclass
class _CachedToken:
    token: str | None
    fetched_at: float | None = None  # set by the keychain path
    mtime_ns: int | None = None  # set by the file path


class CredentialResolver:
    """Resolves the bearer token for the usage endpoint. Never raises."""

    def __init__(
        self,
        credentials_path: Path | None = None,
        keychain_service: str | None = None,
        ttl: float | None = None,
        override: str = "",
        platform: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.credentials_path = credentials_path or settings.credentials_path
        self.keychain_service = keychain_service or settings.keychain_service
        self.ttl = ttl if ttl is not None else settings.token_cache_ttl
        self._override = override
        self._platform = platform or sys.platform
        self._clock = clock
        self._cached: _CachedToken | None = None

    async def get_token(self) -> str | None:
        if self._override:
            return self._override
        try:
            if self._platform == "darwin":
                return await self._from_keychain()
            return self._from_file()
        except Exception as e:
            logger.debug("Token lookup failed: %s", e)
            return None

    async def _from_keychain(self) -> str | None:
        cached = self._cached
        if cached and cached.fetched_at is not None and self._clock() - cached.fetched_at < self.ttl:
            return cached.token

        try:
            raw = await asyncio.to_thread(self._read_keychain)
            token = _extract_token(raw)
        except (OSError, subprocess.SubprocessError, ValueError) as e:
            logger.debug("Keychain lookup failed, falling back to %s: %s", self.credentials_path, e)
            return self._from_file()

        self._cached = _CachedToken(token=token, fetched_at=self._clock())
        return token

    def _read_keychain(self) -> str:
        """Run the ``security`` helper and return the stored JSON blob."""
        result = subprocess.run(
            ["security", "find-generic-password", "-s", self.keychain_service, "-w"],
            capture_output=True,
            text=True,
            timeout=_KEYCHAIN_TIMEOUT,
            check=True,
        )
        return result.stdout.strip()

    def _from_file(self) -> str | None:
        try:
            mtime_ns = self.credentials_path.stat().st_mtime_ns
            cached = self._cached
            if cached and cached.mtime_ns == mtime_ns:
                return cached.token

            token = _extract_token(self.credentials_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.debug("Could not read %s: %s", self.credentials_path, e)
            return None

        self._cached = _CachedToken(token=token, mtime_ns=mtime_ns)
        return token
