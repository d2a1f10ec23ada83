"""Shared fixtures for token issuance tests."""
from __future__ import annotations

import time
from collections.abc import Callable

import jwt
import pytest

from calltoken.core.config import Settings

JWT_SECRET = "test-identity-secret-0123456789abcdef"
APP_ID = "970CA35de60c44645bbae8a215061b33"
APP_CERTIFICATE = "5CFd2fd1755d40ecb72977518be15d3b"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        agora_app_id=APP_ID,
        agora_app_certificate=APP_CERTIFICATE,
        identity_jwt_secret=JWT_SECRET,
        identity_jwt_audience="authenticated",
        token_ttl_seconds=3600,
        token_cooldown_seconds=30,
    )


@pytest.fixture
def bearer() -> Callable[..., str]:
    """Return a factory producing ``Authorization`` header values."""

    def _make(user_id: str, *, secret: str = JWT_SECRET, expires_in: int = 600, **claims) -> str:
        payload = {"sub": user_id, "aud": "authenticated", "exp": int(time.time()) + expires_in}
        payload.update(claims)
        return f"Bearer {jwt.encode(payload, secret, algorithm='HS256')}"

    return _make
