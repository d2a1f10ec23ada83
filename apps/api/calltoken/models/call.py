"""Call session, participant and call log models."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, BigInteger, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, new_id, utcnow

TOKEN_GENERATED_EVENT = "token_generated"


class CallSession(Base):
    """A call hosted on the RTC provider.

    Rows are owned by the session management service; token issuance only
    reads them.
    """

    __tablename__ = "call_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    team_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    channel_id: Mapped[str | None] = mapped_column(String(36))
    call_type: Mapped[str] = mapped_column(String(20), default="audio", nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="ringing", nullable=False)
    initiator_id: Mapped[str] = mapped_column(String(36), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    agora_channel_name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    token_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    participants: Mapped[list["CallParticipant"]] = relationship(
        back_populates="call_session", cascade="all, delete-orphan"
    )


class CallParticipant(Base):
    """A user allowed to join a call session."""

    __tablename__ = "call_participants"
    __table_args__ = (UniqueConstraint("call_session_id", "user_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    call_session_id: Mapped[str] = mapped_column(
        ForeignKey("call_sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    joined_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    left_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    call_session: Mapped[CallSession] = relationship(back_populates="participants")


class CallLog(Base):
    """Append-only call event log; ``token_generated`` rows drive rate limiting."""

    __tablename__ = "call_logs"
    __table_args__ = (
        Index("ix_call_logs_session_user_event_ts", "call_session_id", "user_id", "event", "timestamp"),
    )

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    call_session_id: Mapped[str | None] = mapped_column(ForeignKey("call_sessions.id", ondelete="CASCADE"))
    event: Mapped[str] = mapped_column(String(64), nullable=False)
    user_id: Mapped[str | None] = mapped_column(String(36))
    metadata_json: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON().with_variant(JSONB, "postgresql")
    )
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
