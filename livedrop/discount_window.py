"""Remaining time and purchase eligibility for a discount stream."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone

from .models import Stream


@dataclass(frozen=True)
class DiscountWindow:
    remaining_seconds: int | None
    eligible: bool


def evaluate(stream: Stream | None, now: datetime | None = None) -> DiscountWindow:
    """Return the countdown and eligibility of ``stream`` at ``now``.

    ``now`` defaults to the current wall-clock time and is re-read on every
    call. The countdown is clamped at zero. Eligibility follows the server's
    ``active`` flag only; an active stream whose ``end_time`` has passed is
    still eligible because the backend decides when the window closes.
    """
    if stream is None:
        return DiscountWindow(remaining_seconds=None, eligible=False)

    remaining = None
    if stream.end_time is not None:
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        delta = (stream.end_time - now).total_seconds()
        remaining = max(0, math.floor(delta))

    return DiscountWindow(remaining_seconds=remaining, eligible=stream.active is True)
