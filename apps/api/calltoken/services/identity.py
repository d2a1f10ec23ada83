"""Resolve the caller from the identity provider's bearer token."""
from __future__ import annotations

import logging
from dataclasses import dataclass

import jwt

from ..core.config import Settings, settings as default_settings
from ..core.errors import Misconfigured, Unauthorized

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CallerIdentity:
    user_id: str
    email: str | None = None


def extract_bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise Unauthorized("Missing Authorization header")
    scheme, _, credential = authorization.partition(" ")
    if scheme.lower() != "bearer" or not credential.strip():
        raise Unauthorized("Invalid or missing authentication")
    return credential.strip()


def resolve_caller(authorization: str | None, config: Settings | None = None) -> CallerIdentity:
    """Verify the bearer credential and return the stable user id it names."""

    config = config or default_settings
    token = extract_bearer_token(authorization)

    secret = config.identity_jwt_secret.get_secret_value()
    if not secret:
        logger.error("identity_config_missing hint=set IDENTITY_JWT_SECRET")
        raise Misconfigured("Identity provider configuration missing")

    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=config.identity_jwt_algorithms,
            audience=config.identity_jwt_audience,
            options={"require": ["exp", "sub"]},
        )
    except jwt.InvalidTokenError as exc:
        logger.info("identity_rejected reason=%s", exc)
        raise Unauthorized("Invalid or missing authentication") from exc

    user_id = str(claims.get("sub") or "").strip()
    if not user_id:
        raise Unauthorized("Invalid or missing authentication")
    return CallerIdentity(user_id=user_id, email=claims.get("email"))
