"""Team membership lookups."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.team import TeamMember


async def is_team_member(session: AsyncSession, *, team_id: str, user_id: str) -> bool:
    """Return whether ``user_id`` belongs to ``team_id``."""

    stmt = select(TeamMember.id).where(TeamMember.team_id == team_id, TeamMember.user_id == user_id).limit(1)
    result = await session.execute(stmt)
    return result.scalar_one_or_none() is not None
