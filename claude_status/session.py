"""Pydantic model for the session snapshot Claude Code writes to stdin."""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_SIZE = 200_000


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # A null field means "not reported"; fall back to the field default
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class ModelInfo(_Lenient):
    id: str = ""
    display_name: str = ""


class Workspace(_Lenient):
    current_dir: str = ""


class CurrentUsage(_Lenient):
    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_input_tokens: int = 0
    cache_read_input_tokens: int = 0

    @property
    def context_tokens(self) -> int:
        """Tokens occupying the context window for the last request."""
        return self.input_tokens + self.cache_creation_input_tokens + self.cache_read_input_tokens


class ContextWindow(_Lenient):
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    context_window_size: int | None = None
    current_usage: CurrentUsage | None = None

    @property
    def size(self) -> int:
        return self.context_window_size or DEFAULT_CONTEXT_SIZE


class Cost(_Lenient):
    total_cost_usd: float | None = 0.0


class SessionInput(_Lenient):
    model: ModelInfo = Field(default_factory=ModelInfo)
    workspace: Workspace = Field(default_factory=Workspace)
    context_window: ContextWindow = Field(default_factory=ContextWindow)
    cost: Cost = Field(default_factory=Cost)
    transcript_path: str | None = None
    session_id: str | None = None


def parse_session(raw: str) -> SessionInput | None:
    """Parse the stdin document; None when it is blank or unusable."""
    if not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("Session input is not JSON")
        return None
    if not isinstance(data, dict):
        return None
    try:
        return SessionInput.model_validate(data)
    except ValidationError as e:
        logger.debug("Session input failed validation: %s", e)
        return None
