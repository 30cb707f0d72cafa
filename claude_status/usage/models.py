"""Pydantic models for the usage API response and its on-disk cache entries."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

logger = logging.getLogger(__name__)

# API body keys, also the snapshot field names
_WINDOW_KEYS = ("five_hour", "seven_day", "seven_day_sonnet")


class UsageWindow(BaseModel):
    percent: int
    reset_time: datetime | None = None

    @field_validator("percent", mode="before")
    @classmethod
    def _round_and_clamp(cls, value: Any) -> int:
        # Half-up rounding, then clamp into [0, 100]
        return max(0, min(100, math.floor(float(value) + 0.5)))


class UsageSnapshot(BaseModel):
    five_hour: UsageWindow | None = None
    seven_day: UsageWindow | None = None
    seven_day_sonnet: UsageWindow | None = None

    @classmethod
    def from_api(cls, body: dict[str, Any]) -> UsageSnapshot:
        """Build a snapshot from the raw ``/api/oauth/usage`` body.

        Each window is ``{"utilization": 35.0, "resets_at": "..."}`` or null.
        A window with no utilization, or one that fails validation, is left
        absent rather than failing the whole snapshot.
        """
        windows: dict[str, UsageWindow] = {}
        for key in _WINDOW_KEYS:
            bucket = body.get(key)
            if not isinstance(bucket, dict) or bucket.get("utilization") is None:
                continue
            try:
                windows[key] = UsageWindow(
                    percent=bucket["utilization"],
                    reset_time=bucket.get("resets_at"),
                )
            except (ValidationError, TypeError, ValueError) as e:
                logger.debug("Skipping malformed %s window: %s", key, e)
        return cls(**windows)


class CacheEntry(BaseModel):
    data: UsageSnapshot
    timestamp: float  # epoch seconds of the network fetch

    def age(self, now: float) -> float:
        return now - self.timestamp
