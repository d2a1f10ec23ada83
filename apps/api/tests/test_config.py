"""Tests for environment-driven settings."""
from __future__ import annotations

from calltoken.core.config import Settings


def test_defaults(monkeypatch) -> None:
    monkeypatch.delenv("AGORA_APP_ID", raising=False)
    monkeypatch.delenv("AGORA_APP_CERTIFICATE", raising=False)

    config = Settings(_env_file=None)

    assert config.token_ttl_seconds == 3600
    assert config.token_cooldown_seconds == 30
    assert config.identity_jwt_algorithms == ["HS256"]
    assert not config.agora_configured


def test_env_values_and_comma_separated_lists(monkeypatch) -> None:
    monkeypatch.setenv("AGORA_APP_ID", "app")
    monkeypatch.setenv("AGORA_APP_CERTIFICATE", "cert-value-0451")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example.com, https://b.example.com")
    monkeypatch.setenv("TOKEN_COOLDOWN_SECONDS", "45")

    config = Settings(_env_file=None)

    assert config.agora_configured
    assert config.cors_allow_origins == ["https://a.example.com", "https://b.example.com"]
    assert config.token_cooldown_seconds == 45
    assert "cert-value-0451" not in repr(config)
