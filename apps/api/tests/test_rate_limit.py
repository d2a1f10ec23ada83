"""Tests for the per-caller issuance cooldown."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from calltoken.core.errors import RateLimited
from calltoken.services import rate_limit

NOW = datetime(2025, 10, 10, 12, 0, tzinfo=timezone.utc)


def test_no_previous_issuance_is_allowed() -> None:
    rate_limit.check_cooldown(None, NOW)


def test_issuance_inside_cooldown_reports_remaining_seconds() -> None:
    with pytest.raises(RateLimited) as exc:
        rate_limit.check_cooldown(NOW - timedelta(seconds=29), NOW)

    assert exc.value.retry_after == 1
    assert "1 seconds" in exc.value.message
    assert exc.value.status_code == 429
    assert exc.value.headers() == {"Retry-After": "1"}


def test_remaining_time_rounds_up() -> None:
    with pytest.raises(RateLimited) as exc:
        rate_limit.check_cooldown(NOW - timedelta(seconds=10, milliseconds=1), NOW)

    assert exc.value.retry_after == 20


def test_issuance_after_cooldown_is_allowed() -> None:
    rate_limit.check_cooldown(NOW - timedelta(seconds=31), NOW)
    rate_limit.check_cooldown(NOW - timedelta(seconds=30), NOW)


def test_naive_store_timestamps_are_treated_as_utc() -> None:
    naive = (NOW - timedelta(seconds=5)).replace(tzinfo=None)

    with pytest.raises(RateLimited) as exc:
        rate_limit.check_cooldown(naive, NOW)

    assert exc.value.retry_after == 25


def test_custom_cooldown() -> None:
    rate_limit.check_cooldown(NOW - timedelta(seconds=5), NOW, cooldown=timedelta(seconds=5))
    with pytest.raises(RateLimited):
        rate_limit.check_cooldown(NOW - timedelta(seconds=5), NOW, cooldown=timedelta(seconds=60))
