"""Authorization checks that run before any token work.

One ``AuthorizationGate`` is used per request. Checks run in a fixed order and
the first failure moves the gate to ``REJECTED`` and raises:

1. bearer credential resolves to a user id            -> Unauthorized
2. session exists with the caller as a participant     -> NotFound
3. session has not ended                               -> Expired
4. session token ceiling, when set, is in the future   -> Expired
5. caller belongs to the session's owning team         -> Unauthorized
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings
from ..core.errors import Expired, NotFound, TokenIssuanceError, Unauthorized
from ..models.call import CallSession
from ..repositories import calls as calls_repo
from ..repositories import teams as teams_repo
from .identity import CallerIdentity, resolve_caller

logger = logging.getLogger(__name__)


class GateState(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    IDENTITY_RESOLVED = "identity_resolved"
    SESSION_LOADED = "session_loaded"
    MEMBERSHIP_VERIFIED = "membership_verified"
    TEAM_VERIFIED = "team_verified"
    AUTHORIZED = "authorized"
    REJECTED = "rejected"


@dataclass(slots=True, frozen=True)
class AuthorizedCall:
    caller: CallerIdentity
    call_session: CallSession


class AuthorizationGate:
    def __init__(self, session: AsyncSession, config: Settings | None = None) -> None:
        self._session = session
        self._config = config
        self.state = GateState.UNAUTHENTICATED
        self.rejection: TokenIssuanceError | None = None

    async def authorize(
        self,
        *,
        authorization: str | None,
        call_session_id: str,
        now: datetime | None = None,
    ) -> AuthorizedCall:
        """Run every check and return the caller with the session they may join."""

        now = now or datetime.now(timezone.utc)
        try:
            caller = resolve_caller(authorization, self._config)
            self.state = GateState.IDENTITY_RESOLVED

            call_session = await calls_repo.get_for_participant(
                self._session, call_session_id=call_session_id, user_id=caller.user_id
            )
            if call_session is None:
                logger.warning(
                    "call_session_fetch_failed call_session_id=%s user_id=%s",
                    call_session_id,
                    caller.user_id,
                )
                raise NotFound("Invalid call session or user not authorized")
            self.state = GateState.SESSION_LOADED

            if call_session.ended_at is not None:
                raise Expired("Call session has already ended")
            ceiling = token_ceiling(call_session)
            if ceiling is not None and ceiling <= now:
                raise Expired("Call session token has expired")
            self.state = GateState.MEMBERSHIP_VERIFIED

            is_member = await teams_repo.is_team_member(
                self._session, team_id=call_session.team_id, user_id=caller.user_id
            )
            if not is_member:
                raise Unauthorized("User is not a member of the team")
            self.state = GateState.TEAM_VERIFIED
        except TokenIssuanceError as exc:
            self.state = GateState.REJECTED
            self.rejection = exc
            raise

        self.state = GateState.AUTHORIZED
        return AuthorizedCall(caller=caller, call_session=call_session)


def token_ceiling(call_session: CallSession) -> datetime | None:
    """Return the session's token expiry ceiling as an aware UTC datetime."""

    value = call_session.token_expires_at
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
