"""Tests for the credential resolver — keychain TTL, file mtime cache, fallback."""

from __future__ import annotations

import asyncio
import json
import os
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from claude_status.config import settings
from claude_status.usage.credentials import CredentialResolver

from conftest import FakeClock


def _creds(token: str) -> str:
    return json.dumps({"claudeAiOauth": {"accessToken": token, "expiresAt": 0}})


@pytest.fixture
def creds_file(tmp_path: Path) -> Path:
    path = tmp_path / ".claude" / ".credentials.json"
    path.parent.mkdir()
    path.write_text(_creds("file-token"), encoding="utf-8")
    return path


def _keychain_result(token: str) -> MagicMock:
    result = MagicMock()
    result.stdout = _creds(token) + "\n"
    result.returncode = 0
    return result


def _bump_mtime(path: Path) -> None:
    st = path.stat()
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + 1_000_000_000))


# ── File source ──────────────────────────────────────────────────────────────


class TestFileSource:
    def test_reads_nested_access_token(self, creds_file: Path) -> None:
        resolver = CredentialResolver(credentials_path=creds_file, platform="linux")
        assert asyncio.run(resolver.get_token()) == "file-token"

    def test_missing_file_returns_none(self, tmp_path: Path) -> None:
        resolver = CredentialResolver(credentials_path=tmp_path / "nope.json", platform="linux")
        assert asyncio.run(resolver.get_token()) is None

    def test_malformed_file_returns_none(self, creds_file: Path) -> None:
        creds_file.write_text("{not json", encoding="utf-8")
        resolver = CredentialResolver(credentials_path=creds_file, platform="linux")
        assert asyncio.run(resolver.get_token()) is None

    def test_missing_token_field_returns_none(self, creds_file: Path) -> None:
        creds_file.write_text(json.dumps({"claudeAiOauth": {}}), encoding="utf-8")
        resolver = CredentialResolver(credentials_path=creds_file, platform="linux")
        assert asyncio.run(resolver.get_token()) is None

    def test_unchanged_file_is_not_reread(self, creds_file: Path) -> None:
        resolver = CredentialResolver(credentials_path=creds_file, platform="linux")
        assert asyncio.run(resolver.get_token()) == "file-token"

        with patch.object(Path, "read_text", side_effect=AssertionError("re-read")):
            assert asyncio.run(resolver.get_token()) == "file-token"

    def test_edit_is_picked_up_via_mtime(self, creds_file: Path) -> None:
        resolver = CredentialResolver(credentials_path=creds_file, platform="linux")
        assert asyncio.run(resolver.get_token()) == "file-token"

        creds_file.write_text(_creds("rotated-token"), encoding="utf-8")
        _bump_mtime(creds_file)
        assert asyncio.run(resolver.get_token()) == "rotated-token"

    def test_override_skips_lookup(self, tmp_path: Path) -> None:
        resolver = CredentialResolver(
            credentials_path=tmp_path / "nope.json", override="env-token", platform="linux"
        )
        assert asyncio.run(resolver.get_token()) == "env-token"


# ── Keychain source ──────────────────────────────────────────────────────────


class TestKeychainSource:
    def test_reads_keychain_on_darwin(self, creds_file: Path) -> None:
        resolver = CredentialResolver(credentials_path=creds_file, platform="darwin")
        with patch(
            "claude_status.usage.credentials.subprocess.run",
            return_value=_keychain_result("kc-token"),
        ) as mock_run:
            assert asyncio.run(resolver.get_token()) == "kc-token"
        args = mock_run.call_args.args[0]
        assert args[:2] == ["security", "find-generic-password"]
        assert "Claude Code-credentials" in args

    def test_cached_within_ttl(self, creds_file: Path) -> None:
        clock = FakeClock()
        resolver = CredentialResolver(credentials_path=creds_file, platform="darwin", clock=clock)
        with patch(
            "claude_status.usage.credentials.subprocess.run",
            return_value=_keychain_result("kc-token"),
        ) as mock_run:
            asyncio.run(resolver.get_token())
            clock.advance(9)
            asyncio.run(resolver.get_token())
            assert mock_run.call_count == 1

            clock.advance(2)
            asyncio.run(resolver.get_token())
            assert mock_run.call_count == 2

    def test_falls_back_to_file_on_failure(self, creds_file: Path) -> None:
        resolver = CredentialResolver(credentials_path=creds_file, platform="darwin")
        with patch(
            "claude_status.usage.credentials.subprocess.run",
            side_effect=subprocess.CalledProcessError(44, "security"),
        ):
            assert asyncio.run(resolver.get_token()) == "file-token"

    def test_single_slot_is_shared_between_sources(self, creds_file: Path) -> None:
        clock = FakeClock()
        resolver = CredentialResolver(credentials_path=creds_file, platform="darwin", clock=clock)
        run = "claude_status.usage.credentials.subprocess.run"

        with patch(run, return_value=_keychain_result("kc-token")):
            assert asyncio.run(resolver.get_token()) == "kc-token"

        # Keychain goes away after the TTL: the file result replaces the slot
        clock.advance(11)
        with patch(run, side_effect=FileNotFoundError("security")):
            assert asyncio.run(resolver.get_token()) == "file-token"

        # The keychain value is gone, so the next call queries it again
        with patch(run, return_value=_keychain_result("kc-token-2")) as mock_run:
            assert asyncio.run(resolver.get_token()) == "kc-token-2"
            assert mock_run.call_count == 1

    def test_never_raises(self, tmp_path: Path) -> None:
        resolver = CredentialResolver(credentials_path=tmp_path / "nope.json", platform="darwin")
        with patch(
            "claude_status.usage.credentials.subprocess.run",
            side_effect=subprocess.TimeoutExpired("security", 5),
        ):
            assert asyncio.run(resolver.get_token()) is None


class TestDefaults:
    def test_taken_from_settings(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setattr(settings, "credentials_path", tmp_path / "creds.json")
        monkeypatch.setattr(settings, "keychain_service", "Other-credentials")
        monkeypatch.setattr(settings, "token_cache_ttl", 3.0)
        resolver = CredentialResolver()
        assert resolver.credentials_path == tmp_path / "creds.json"
        assert resolver.keychain_service == "Other-credentials"
        assert resolver.ttl == 3.0
