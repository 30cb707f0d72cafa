from claude_status.usage.cache import UsageCache, token_digest
from claude_status.usage.client import UsageApiError, UsageClient, UsageOfflineError
from claude_status.usage.credentials import CredentialResolver
from claude_status.usage.models import CacheEntry, UsageSnapshot, UsageWindow

__all__ = [
    "UsageCache",
    "token_digest",
    "UsageClient",
    "UsageApiError",
    "UsageOfflineError",
    "CredentialResolver",
    "CacheEntry",
    "UsageSnapshot",
    "UsageWindow",
]
