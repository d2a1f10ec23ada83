"""Data contracts for the RTC token endpoint."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RtcTokenRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    call_session_id: str = Field(..., alias="callSessionId", min_length=1, description="Call session to join")


class RtcTokenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(..., description="Base64 encoded, signed RTC token")
    channel_name: str = Field(..., alias="channelName", description="Provider channel to join")
    uid: int = Field(..., ge=1, le=0xFFFFFFFF, description="Numeric provider uid for the caller")
    expires_at: int = Field(..., alias="expiresAt", ge=0, description="Privilege expiry, UNIX seconds")


class ErrorResponse(BaseModel):
    error: str
    type: str
