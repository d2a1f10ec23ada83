"""Map user identifiers onto the provider's 32-bit numeric uid space.

The uid is the first 8 hex digits of the identifier once every non-hex
character is dropped, so the same user gets the same uid on every refresh.
Identifiers that do not yield a usable value (fewer than 8 hex digits, or
exactly 0, which the provider reserves for auto-assignment) fall back to a
random nonzero uid. The fallback is not deterministic; it only exists so
that degenerate identifiers still get a valid uid.
"""
from __future__ import annotations

import logging
import re
import secrets

UID_HEX_DIGITS = 8
UID_MAX = 0xFFFFFFFF

_NON_HEX = re.compile(r"[^0-9a-fA-F]")

logger = logging.getLogger(__name__)


def random_uid() -> int:
    """Return a uniformly random uid in [1, 2**32 - 1]."""

    return secrets.randbelow(UID_MAX) + 1


def uid_for_user(user_id: str) -> int:
    """Return the provider uid for ``user_id``; never 0."""

    prefix = _NON_HEX.sub("", user_id)[:UID_HEX_DIGITS]
    if len(prefix) == UID_HEX_DIGITS:
        parsed = int(prefix, 16)
        if parsed:
            return parsed

    logger.warning("uid_fallback user_id=%s", user_id)
    return random_uid()
