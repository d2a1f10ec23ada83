"""Typed failures for token issuance.

Every failure is terminal for the request. The HTTP layer renders them as
``{"error": <message>, "type": <kind>}`` with the status carried here.
"""
from __future__ import annotations

from fastapi import status


class TokenIssuanceError(Exception):
    """Base class for all issuance failures."""

    kind = "Error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def headers(self) -> dict[str, str] | None:
        return None


class BadRequest(TokenIssuanceError):
    kind = "BadRequest"
    status_code = status.HTTP_400_BAD_REQUEST


class Misconfigured(TokenIssuanceError):
    kind = "Misconfigured"
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(TokenIssuanceError):
    kind = "Unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFound(TokenIssuanceError):
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND


class Expired(TokenIssuanceError):
    kind = "Expired"
    status_code = status.HTTP_410_GONE


class RateLimited(TokenIssuanceError):
    kind = "RateLimited"
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, retry_after: int) -> None:
        super().__init__(
            f"Token recently generated. Please wait {retry_after} seconds before requesting another."
        )
        self.retry_after = retry_after

    def headers(self) -> dict[str, str] | None:
        return {"Retry-After": str(self.retry_after)}


class IssuanceFailed(TokenIssuanceError):
    """Unexpected failure while issuing, reported under the original error's name."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, kind: str, message: str = "Token generation failed") -> None:
        super().__init__(message)
        self.kind = kind

    @classmethod
    def wrap(cls, exc: BaseException) -> IssuanceFailed:
        return cls(type(exc).__name__)
