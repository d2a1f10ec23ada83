"""Per (session, caller) cooldown between token issuances."""
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

from ..core.errors import RateLimited

DEFAULT_COOLDOWN = timedelta(seconds=30)


def check_cooldown(
    last_issued_at: datetime | None,
    now: datetime,
    cooldown: timedelta = DEFAULT_COOLDOWN,
) -> None:
    """Raise ``RateLimited`` if the last issuance is younger than ``cooldown``.

    The wait reported to the caller is the remaining cooldown rounded up to
    whole seconds.
    """

    if last_issued_at is None:
        return

    elapsed = now - _ensure_tz(last_issued_at)
    if elapsed >= cooldown:
        return

    remaining_ms = (cooldown - elapsed) / timedelta(milliseconds=1)
    raise RateLimited(retry_after=math.ceil(remaining_ms / 1000))


def _ensure_tz(value: datetime) -> datetime:
    """Treat naive timestamps from the store as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
