"""Tiered usage cache — memory → disk → network, keyed by token digest.

Features:
- Lookup tiers are an ordered tuple of strategies; the first non-None wins
- At most one network fetch per digest is in flight; later callers await it
- No token available: serve the last digest's entry (disk allows 10× the TTL)
- Disk tier is best-effort; any I/O error degrades to memory-only
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import os
import time
from collections.abc import Awaitable, Callable
from pathlib import Path

from pydantic import ValidationError

from claude_status.config import settings
from claude_status.usage.client import UsageApiError, UsageClient, UsageOfflineError
from claude_status.usage.credentials import CredentialResolver
from claude_status.usage.models import CacheEntry, UsageSnapshot

logger = logging.getLogger(__name__)

STALE_TTL_FACTOR = 10
DIGEST_LENGTH = 16
_LAST_DIGEST_FILE = "last-digest"

Lookup = Callable[[str, str, float], Awaitable[UsageSnapshot | None]]


def token_digest(token: str) -> str:
    """Truncated SHA-256 of the token, used as the cache key."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:DIGEST_LENGTH]


class UsageCache:
    """Serves usage snapshots through memory, disk and network tiers."""

    def __init__(
        self,
        resolver: CredentialResolver,
        client: UsageClient,
        cache_dir: Path | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.resolver = resolver
        self.client = client
        self.cache_dir = cache_dir or settings.cache_dir
        self._clock = clock
        self._memory: dict[str, CacheEntry] = {}
        self._pending: dict[str, asyncio.Task[UsageSnapshot | None]] = {}
        self._last_digest: str | None = None
        self._lookups: tuple[Lookup, ...] = (
            self._from_memory,
            self._from_disk,
            self._from_network,
        )

    async def fetch_usage(self, ttl: float | None = None) -> UsageSnapshot | None:
        """Return a usage snapshot no older than ``ttl`` seconds, or None.

        Falls back to stale data for the last known digest when no token can
        be resolved. Never raises.
        """
        if ttl is None:
            ttl = settings.usage_ttl
        try:
            token = await self.resolver.get_token()
            if not token:
                return self._serve_stale(ttl)

            digest = token_digest(token)
            self._remember_digest(digest)

            for lookup in self._lookups:
                data = await lookup(digest, token, ttl)
                if data is not None:
                    return data
            return None
        except Exception:
            logger.debug("Usage lookup failed", exc_info=True)
            return None

    # -- Tiers ---------------------------------------------------------------

    async def _from_memory(self, digest: str, token: str, ttl: float) -> UsageSnapshot | None:
        entry = self._memory.get(digest)
        if entry and entry.age(self._clock()) < ttl:
            return entry.data
        return None

    async def _from_disk(self, digest: str, token: str, ttl: float) -> UsageSnapshot | None:
        entry = self._load_disk(digest, ttl)
        if entry is None:
            return None
        # Keep the fetch timestamp so the entry still expires on schedule
        self._memory[digest] = entry
        return entry.data

    async def _from_network(self, digest: str, token: str, ttl: float) -> UsageSnapshot | None:
        task = self._pending.get(digest)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_store(digest, token))
            self._pending[digest] = task
            task.add_done_callback(lambda t: self._forget_pending(digest, t))
        else:
            logger.debug("Joining in-flight usage fetch for %s", digest)
        # Shield so one cancelled waiter does not cancel the fetch for the rest
        return await asyncio.shield(task)

    def _forget_pending(self, digest: str, task: asyncio.Task[UsageSnapshot | None]) -> None:
        if self._pending.get(digest) is task:
            del self._pending[digest]

    async def _fetch_and_store(self, digest: str, token: str) -> UsageSnapshot | None:
        try:
            data = await self.client.fetch(token)
        except UsageOfflineError as e:
            logger.debug("Usage endpoint offline: %s", e)
            return None
        except UsageApiError as e:
            logger.debug("Usage endpoint rejected request: %s", e)
            return None

        entry = CacheEntry(data=data, timestamp=self._clock())
        self._memory[digest] = entry
        self._save_disk(digest, entry)
        return data

    def _serve_stale(self, ttl: float) -> UsageSnapshot | None:
        digest = self._last_digest or self._load_last_digest()
        if digest is None:
            return None
        entry = self._memory.get(digest)
        if entry:
            return entry.data
        entry = self._load_disk(digest, ttl * STALE_TTL_FACTOR)
        return entry.data if entry else None

    # -- Disk ----------------------------------------------------------------

    def cache_path(self, digest: str) -> Path:
        return self.cache_dir / f"usage-{digest}.json"

    def _ensure_dir(self) -> None:
        self.cache_dir.mkdir(mode=0o700, parents=True, exist_ok=True)

    def _load_disk(self, digest: str, ttl: float) -> CacheEntry | None:
        try:
            entry = CacheEntry.model_validate_json(self.cache_path(digest).read_bytes())
        except FileNotFoundError:
            return None
        except (OSError, ValidationError) as e:
            logger.debug("Ignoring unreadable cache file for %s: %s", digest, e)
            return None
        if entry.age(self._clock()) < ttl:
            return entry
        return None

    def _write_private(self, path: Path, content: str) -> None:
        """Atomically write ``content`` to ``path`` with owner-only permissions."""
        tmp = path.with_suffix(path.suffix + ".tmp")
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, path)

    def _save_disk(self, digest: str, entry: CacheEntry) -> None:
        try:
            self._ensure_dir()
            self._write_private(self.cache_path(digest), entry.model_dump_json())
        except OSError as e:
            logger.debug("Could not write usage cache for %s: %s", digest, e)

    def _remember_digest(self, digest: str) -> None:
        if digest == self._last_digest:
            return
        self._last_digest = digest
        if self._load_last_digest() == digest:
            return
        try:
            self._ensure_dir()
            self._write_private(self.cache_dir / _LAST_DIGEST_FILE, digest)
        except OSError as e:
            logger.debug("Could not record last digest: %s", e)

    def _load_last_digest(self) -> str | None:
        try:
            digest = (self.cache_dir / _LAST_DIGEST_FILE).read_text(encoding="utf-8").strip()
        except OSError:
            return None
        if len(digest) != DIGEST_LENGTH or not all(c in "0123456789abcdef" for c in digest):
            return None
        return digest
