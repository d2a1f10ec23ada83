"""Tests for mapping user ids onto provider uids."""
from __future__ import annotations

import pytest

from calltoken.services import uid as uid_service


def test_uid_uses_first_eight_hex_digits() -> None:
    user_id = "3b2d7c41-8f6a-4e15-9c3d-2a7b9e10f001"

    assert uid_service.uid_for_user(user_id) == 0x3B2D7C41
    assert uid_service.uid_for_user(user_id) == uid_service.uid_for_user(user_id)


def test_separators_are_ignored_before_truncation() -> None:
    assert uid_service.uid_for_user("12-34-56-78-9a") == 0x12345678


def test_any_non_hex_separator_keeps_uid_stable() -> None:
    user_id = "usr:3b2d7c41_8f6a"

    assert uid_service.uid_for_user(user_id) == 0x3B2D7C41
    assert uid_service.uid_for_user(user_id) == uid_service.uid_for_user(user_id)


def test_max_value_is_kept() -> None:
    assert uid_service.uid_for_user("ffffffff-0000-0000-0000-000000000000") == 0xFFFFFFFF


@pytest.mark.parametrize(
    "user_id",
    [
        "00000000-1234-4abc-8def-000000000000",
        "abc",
        "zzzzzzzz-not-hex",
        "user-abc",
        "",
    ],
)
def test_degenerate_ids_fall_back_to_random_nonzero_uid(monkeypatch, user_id) -> None:
    monkeypatch.setattr(uid_service.secrets, "randbelow", lambda upper: 41)

    assert uid_service.uid_for_user(user_id) == 42


def test_random_uid_is_never_zero(monkeypatch) -> None:
    monkeypatch.setattr(uid_service.secrets, "randbelow", lambda upper: 0)
    assert uid_service.random_uid() == 1

    monkeypatch.setattr(uid_service.secrets, "randbelow", lambda upper: upper - 1)
    assert uid_service.random_uid() == 0xFFFFFFFF
