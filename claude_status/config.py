from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {
        "env_prefix": "CLAUDE_STATUS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # Usage endpoint
    usage_url: str = "https://api.anthropic.com/api/oauth/usage"
    usage_timeout: float = 5.0  # seconds, covers connect + read
    usage_ttl: int = 60  # seconds a fetched snapshot stays fresh

    # Flat cache directory (one file per token digest)
    cache_dir: Path = Path.home() / ".cache" / "claude-status"

    # Credentials
    credentials_path: Path = Path.home() / ".claude" / ".credentials.json"
    keychain_service: str = "Claude Code-credentials"  # macOS only
    token_cache_ttl: float = 10.0
    oauth_token: str = ""  # skips keychain / file lookup when set

    # Logging (stderr only; stdout is the status bar)
    log_level: str = "WARNING"


settings = Settings()
