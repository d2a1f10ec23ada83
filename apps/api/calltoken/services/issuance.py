"""Token issuance: authorization, rate limiting, signing and audit logging."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings, settings as default_settings
from ..core.errors import Misconfigured, TokenIssuanceError
from ..models.call import TOKEN_GENERATED_EVENT
from ..repositories import calls as calls_repo
from ..schemas import rtc as schemas
from . import rate_limit
from . import rtc as rtc_codec
from .authorization import AuthorizationGate, token_ceiling
from .uid import uid_for_user

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RequestContext:
    """Request details recorded alongside each issuance."""

    authorization: str | None = None
    origin: str | None = None
    user_agent: str | None = None
    now: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def compute_expiry(now: datetime, ttl: timedelta, ceiling: datetime | None) -> int:
    """Return the privilege expiry: the default window, clamped to the ceiling."""

    default_expiry = int((now + ttl).timestamp())
    if ceiling is None:
        return default_expiry
    return min(default_expiry, int(ceiling.timestamp()))


async def issue_token(
    payload: schemas.RtcTokenRequest,
    session: AsyncSession,
    context: RequestContext,
    config: Settings | None = None,
) -> schemas.RtcTokenResponse:
    """Authorize the caller and return a signed token for the requested call."""

    config = config or default_settings
    try:
        return await _issue(payload, session, context, config)
    except TokenIssuanceError as exc:
        logger.warning("token_generation_rejected type=%s message=%s", exc.kind, exc.message)
        raise


async def _issue(
    payload: schemas.RtcTokenRequest,
    session: AsyncSession,
    context: RequestContext,
    config: Settings,
) -> schemas.RtcTokenResponse:
    if not config.agora_configured:
        logger.error(
            "agora_config_missing has_app_id=%s has_certificate=%s hint=%s",
            bool(config.agora_app_id),
            bool(config.agora_app_certificate.get_secret_value()),
            "set AGORA_APP_ID and AGORA_APP_CERTIFICATE, then redeploy",
        )
        raise Misconfigured("Agora is not configured. Please check your environment variables.")

    now = context.now
    gate = AuthorizationGate(session, config)
    authorized = await gate.authorize(
        authorization=context.authorization,
        call_session_id=payload.call_session_id,
        now=now,
    )
    caller = authorized.caller
    call_session = authorized.call_session

    last_issued_at = await calls_repo.latest_event_at(
        session,
        call_session_id=call_session.id,
        user_id=caller.user_id,
        event=TOKEN_GENERATED_EVENT,
    )
    rate_limit.check_cooldown(
        last_issued_at, now, cooldown=timedelta(seconds=config.token_cooldown_seconds)
    )

    expires_at = compute_expiry(
        now, timedelta(seconds=config.token_ttl_seconds), token_ceiling(call_session)
    )
    uid = uid_for_user(caller.user_id)
    token = rtc_codec.build_token(
        config.agora_app_id,
        config.agora_app_certificate.get_secret_value(),
        call_session.agora_channel_name,
        uid,
        rtc_codec.RtcRole.PUBLISHER,
        expires_at,
        issued_at=int(now.timestamp()),
    )

    await _record_issuance(
        session,
        call_session_id=call_session.id,
        user_id=caller.user_id,
        metadata={
            "agora_channel_name": call_session.agora_channel_name,
            "expiration_time": expires_at,
            "agora_uid": uid,
            "origin": context.origin or "unknown",
            "user_agent": context.user_agent or "unknown",
        },
        timestamp=now,
    )

    logger.info(
        "token_generated call_session_id=%s user_id=%s uid=%s expires_at=%s",
        call_session.id,
        caller.user_id,
        uid,
        expires_at,
    )
    return schemas.RtcTokenResponse(
        token=token,
        channel_name=call_session.agora_channel_name,
        uid=uid,
        expires_at=expires_at,
    )


async def _record_issuance(session: AsyncSession, *, call_session_id: str, user_id: str, **kwargs) -> None:
    """Append the audit row; failures are logged and never reach the caller."""

    try:
        await calls_repo.append_log(
            session,
            call_session_id=call_session_id,
            user_id=user_id,
            event=TOKEN_GENERATED_EVENT,
            **kwargs,
        )
        await session.commit()
    except Exception:
        # Token is already signed at this point.
        logger.exception(
            "token_generation_log_failed call_session_id=%s user_id=%s", call_session_id, user_id
        )
        try:
            await session.rollback()
        except Exception:
            logger.warning(
                "token_generation_log_rollback_failed call_session_id=%s", call_session_id, exc_info=True
            )
