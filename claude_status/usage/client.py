"""httpx-based client for the OAuth usage endpoint.

``fetch()`` returns a typed snapshot or raises UsageOfflineError / UsageApiError.
"""

from __future__ import annotations

import logging

import httpx

from claude_status import __version__
from claude_status.config import settings
from claude_status.usage.models import UsageSnapshot

logger = logging.getLogger(__name__)


class UsageOfflineError(Exception):
    """Raised when the usage endpoint is unreachable or times out."""


class UsageApiError(Exception):
    """Raised when the usage endpoint returns an error or an unreadable body."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Usage API error {status_code}: {detail}")


class UsageClient:
    """Async httpx client for the rate-limit usage endpoint."""

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url or settings.usage_url
        self._timeout = timeout if timeout is not None else settings.usage_timeout
        self._transport = transport

    @staticmethod
    def _headers(token: str) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": f"claude-status/{__version__}",
            "Authorization": f"Bearer {token}",
            "anthropic-beta": "oauth-2025-04-20",
        }

    async def fetch(self, token: str) -> UsageSnapshot:
        """GET the usage endpoint with a bearer token."""
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.get(self._url, headers=self._headers(token))
        except httpx.TimeoutException:
            raise UsageOfflineError("Usage request timed out")
        except httpx.HTTPError as e:
            raise UsageOfflineError(f"Usage endpoint unreachable: {e}")

        if not resp.is_success:
            detail = resp.text
            try:
                detail = resp.json().get("error", {}).get("message", resp.text)
            except Exception:
                pass
            raise UsageApiError(resp.status_code, str(detail))

        try:
            body = resp.json()
        except ValueError:
            raise UsageApiError(resp.status_code, "response body is not JSON")
        if not isinstance(body, dict):
            raise UsageApiError(resp.status_code, "response body is not an object")

        return UsageSnapshot.from_api(body)
