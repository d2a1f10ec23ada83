"""RTC token issuance endpoint."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import IssuanceFailed, TokenIssuanceError
from ..db.session import get_session
from ..schemas import rtc as schemas
from ..services import issuance

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    status_code: {"model": schemas.ErrorResponse}
    for status_code in (400, 401, 404, 410, 429)
}


@router.post("/token", response_model=schemas.RtcTokenResponse, responses=ERROR_RESPONSES)
async def create_rtc_token(
    payload: schemas.RtcTokenRequest,
    session: AsyncSession = Depends(get_session),
    authorization: str | None = Header(default=None),
    origin: str | None = Header(default=None),
    user_agent: str | None = Header(default=None),
) -> schemas.RtcTokenResponse:
    """Return a signed token that admits the caller to the call's channel."""

    context = issuance.RequestContext(authorization=authorization, origin=origin, user_agent=user_agent)
    try:
        return await issuance.issue_token(payload, session, context)
    except TokenIssuanceError:
        raise
    except Exception as exc:
        # Rendered by the app's TokenIssuanceError handler so CORS headers still apply.
        logger.exception("token_generation_failed call_session_id=%s", payload.call_session_id)
        raise IssuanceFailed.wrap(exc) from exc
