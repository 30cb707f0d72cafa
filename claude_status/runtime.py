"""Process-lifetime context owning every cache the status bar uses."""

from __future__ import annotations

import asyncio
import logging

from claude_status.config import Settings, settings as default_settings
from claude_status.session import SessionInput
from claude_status.transcript.reader import ParsedLog, TranscriptReader
from claude_status.usage.cache import UsageCache
from claude_status.usage.client import UsageClient
from claude_status.usage.credentials import CredentialResolver
from claude_status.usage.models import UsageSnapshot

logger = logging.getLogger(__name__)


class StatusRuntime:
    """Credential slot, usage caches and transcript slot for one process."""

    def __init__(
        self,
        config: Settings | None = None,
        *,
        resolver: CredentialResolver | None = None,
        client: UsageClient | None = None,
        reader: TranscriptReader | None = None,
    ) -> None:
        self.config = config or default_settings
        self.credentials = resolver or CredentialResolver(
            credentials_path=self.config.credentials_path,
            keychain_service=self.config.keychain_service,
            ttl=self.config.token_cache_ttl,
            override=self.config.oauth_token,
        )
        self.usage = UsageCache(
            self.credentials,
            client or UsageClient(url=self.config.usage_url, timeout=self.config.usage_timeout),
            cache_dir=self.config.cache_dir,
        )
        self.transcripts = reader or TranscriptReader()

    async def read_transcript(self, session: SessionInput) -> ParsedLog | None:
        if not session.transcript_path:
            return None
        return await asyncio.to_thread(self.transcripts.read, session.transcript_path)

    async def collect(
        self, session: SessionInput, ttl: float | None = None
    ) -> tuple[UsageSnapshot | None, ParsedLog | None]:
        """Fetch usage and read the transcript concurrently."""
        usage, log = await asyncio.gather(
            self.usage.fetch_usage(ttl if ttl is not None else self.config.usage_ttl),
            self.read_transcript(session),
        )
        return usage, log
