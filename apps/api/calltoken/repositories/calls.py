"""Call session and call log repository helpers."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.call import CallLog, CallParticipant, CallSession


async def get_for_participant(
    session: AsyncSession,
    *,
    call_session_id: str,
    user_id: str,
) -> CallSession | None:
    """Return the call session only if ``user_id`` is one of its participants.

    A missing session and a session the user does not participate in are
    indistinguishable to the caller.
    """

    stmt: Select[tuple[CallSession]] = (
        select(CallSession)
        .join(CallParticipant, CallParticipant.call_session_id == CallSession.id)
        .where(CallSession.id == call_session_id, CallParticipant.user_id == user_id)
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def latest_event_at(
    session: AsyncSession,
    *,
    call_session_id: str,
    user_id: str,
    event: str,
) -> datetime | None:
    """Return the timestamp of the newest matching log entry, if any."""

    stmt = (
        select(CallLog.timestamp)
        .where(
            CallLog.call_session_id == call_session_id,
            CallLog.user_id == user_id,
            CallLog.event == event,
        )
        .order_by(CallLog.timestamp.desc())
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def append_log(
    session: AsyncSession,
    *,
    call_session_id: str,
    user_id: str,
    event: str,
    metadata: dict[str, Any] | None = None,
    timestamp: datetime | None = None,
) -> CallLog:
    """Append a call log entry. Entries are never updated afterwards."""

    entry = CallLog(
        call_session_id=call_session_id,
        user_id=user_id,
        event=event,
        metadata_json=metadata or {},
    )
    if timestamp is not None:
        entry.timestamp = timestamp
    session.add(entry)
    await session.flush()
    return entry
