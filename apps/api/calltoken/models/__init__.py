"""Expose ORM models."""
from .call import TOKEN_GENERATED_EVENT, CallLog, CallParticipant, CallSession
from .team import TeamMember

__all__ = [
    "TOKEN_GENERATED_EVENT",
    "CallLog",
    "CallParticipant",
    "CallSession",
    "TeamMember",
]
