"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import httpx
import pytest

from claude_status.usage.cache import UsageCache
from claude_status.usage.client import UsageClient

API_BODY: dict[str, Any] = {
    "five_hour": {"utilization": 35.4, "resets_at": "2026-10-19T15:00:00+00:00"},
    "seven_day": {"utilization": 14.5, "resets_at": "2026-10-23T09:00:00+00:00"},
    "seven_day_sonnet": None,
    "seven_day_opus": None,
}


class FakeClock:
    """Manually advanced replacement for time.time()."""

    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubResolver:
    """Stands in for CredentialResolver; ``token`` can be changed mid-test."""

    def __init__(self, token: str | None = "tok-abc") -> None:
        self.token = token

    async def get_token(self) -> str | None:
        return self.token


class UsageEndpoint:
    """httpx MockTransport handler that counts calls to the usage endpoint."""

    def __init__(self, status_code: int = 200, body: Any = None, delay: float = 0.01) -> None:
        self.status_code = status_code
        self.body = API_BODY if body is None else body
        self.delay = delay
        self.calls = 0
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        self.requests.append(request)
        await asyncio.sleep(self.delay)
        return httpx.Response(self.status_code, json=self.body)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def resolver() -> StubResolver:
    return StubResolver()


@pytest.fixture
def endpoint() -> UsageEndpoint:
    return UsageEndpoint()


@pytest.fixture
def usage_client(endpoint: UsageEndpoint) -> UsageClient:
    return UsageClient(transport=httpx.MockTransport(endpoint))


@pytest.fixture
def usage_cache(
    resolver: StubResolver, usage_client: UsageClient, tmp_path: Path, clock: FakeClock
) -> UsageCache:
    """A UsageCache with a stub token source, mocked HTTP and a temp cache dir."""
    return UsageCache(resolver, usage_client, cache_dir=tmp_path / "cache", clock=clock)


@pytest.fixture
def write_transcript(tmp_path: Path):
    """Write a list of records (dicts or raw strings) as a JSONL transcript."""

    def _write(records: list[Any], name: str = "session.jsonl") -> Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as f:
            for record in records:
                f.write((record if isinstance(record, str) else json.dumps(record)) + "\n")
        return path

    return _write
