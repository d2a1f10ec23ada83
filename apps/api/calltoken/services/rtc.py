"""RTC access token codec.

Packs and signs the provider's binary token layout. All byte-layout knowledge
lives here; callers only see ``build_token`` and ``parse_token``.

Layout (big-endian throughout)::

    version(1) | service_type(1) | app_id(32) | channel_len(2) | channel(n)
    | uid(4) | issued_at(4) | salt(4) | privilege_expiry(4) | signature(32)

The signature is HMAC-SHA256 over every byte before it, keyed with the app
certificate. The whole buffer is encoded with standard base64.
"""
from __future__ import annotations

import base64
import binascii
import enum
import hashlib
import hmac
import secrets
import struct
import time
from dataclasses import dataclass

TOKEN_VERSION = 0x01
SERVICE_TYPE_RTC = 0x01
APP_ID_LENGTH = 32
SIGNATURE_LENGTH = hashlib.sha256().digest_size
UINT16_MAX = 0xFFFF
UINT32_MAX = 0xFFFFFFFF

# version, service type, app id, channel name length
HEADER_FORMAT = ">BB32sH"
# uid, issued_at, salt, privilege expiry
TRAILER_FORMAT = ">IIII"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
TRAILER_SIZE = struct.calcsize(TRAILER_FORMAT)


class RtcRole(enum.IntEnum):
    PUBLISHER = 1
    SUBSCRIBER = 2


class TokenFormatError(ValueError):
    """Raised when a token string cannot be decoded into the known layout."""


@dataclass(slots=True, frozen=True)
class ParsedToken:
    version: int
    service_type: int
    app_id: str
    channel_name: str
    uid: int
    issued_at: int
    salt: int
    privilege_expiry: int
    message: bytes
    signature: bytes


def pack_message(
    app_id: str,
    channel_name: str,
    uid: int,
    issued_at: int,
    salt: int,
    privilege_expiry: int,
) -> bytes:
    """Return the unsigned message buffer."""

    channel_bytes = channel_name.encode("utf-8")
    assert len(channel_bytes) <= UINT16_MAX, "channel name too long for a 2-byte length prefix"

    # struct's "32s" truncates and NUL-pads the app id.
    header = struct.pack(
        HEADER_FORMAT,
        TOKEN_VERSION,
        SERVICE_TYPE_RTC,
        app_id.encode("utf-8"),
        len(channel_bytes),
    )
    trailer = struct.pack(TRAILER_FORMAT, uid, issued_at, salt, privilege_expiry)
    return header + channel_bytes + trailer


def sign(message: bytes, app_certificate: str) -> bytes:
    return hmac.new(app_certificate.encode("utf-8"), message, hashlib.sha256).digest()


def build_token(
    app_id: str,
    app_certificate: str,
    channel_name: str,
    uid: int,
    role: RtcRole,
    privilege_expiry: int,
    *,
    issued_at: int | None = None,
    salt: int | None = None,
) -> str:
    """Build a signed, base64 encoded RTC token.

    ``issued_at`` and ``salt`` are generated fresh on every call unless given
    explicitly; pass them only to obtain reproducible output.
    """

    assert app_id, "app_id is required"
    assert app_certificate, "app_certificate is required"
    assert channel_name, "channel_name is required"
    assert 0 <= uid <= UINT32_MAX, "uid must fit in 32 bits"
    assert 0 <= privilege_expiry <= UINT32_MAX, "privilege expiry must fit in 32 bits"
    assert role in (RtcRole.PUBLISHER, RtcRole.SUBSCRIBER), "unknown role"

    if issued_at is None:
        issued_at = int(time.time())
    if salt is None:
        salt = secrets.randbits(32)

    message = pack_message(app_id, channel_name, uid, issued_at, salt, privilege_expiry)
    return base64.b64encode(message + sign(message, app_certificate)).decode("ascii")


def parse_token(token: str) -> ParsedToken:
    """Decode a token produced by ``build_token``."""

    try:
        raw = base64.b64decode(token, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise TokenFormatError("Token is not valid base64") from exc

    if len(raw) < HEADER_SIZE + TRAILER_SIZE + SIGNATURE_LENGTH:
        raise TokenFormatError("Token is too short")

    version, service_type, app_id_raw, channel_len = struct.unpack_from(HEADER_FORMAT, raw, 0)
    message_len = HEADER_SIZE + channel_len + TRAILER_SIZE
    if len(raw) != message_len + SIGNATURE_LENGTH:
        raise TokenFormatError("Token length does not match its channel name length")

    channel_raw = raw[HEADER_SIZE : HEADER_SIZE + channel_len]
    uid, issued_at, salt, privilege_expiry = struct.unpack_from(
        TRAILER_FORMAT, raw, HEADER_SIZE + channel_len
    )
    try:
        app_id = app_id_raw.rstrip(b"\x00").decode("utf-8")
        channel_name = channel_raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise TokenFormatError("Token contains invalid text fields") from exc

    return ParsedToken(
        version=version,
        service_type=service_type,
        app_id=app_id,
        channel_name=channel_name,
        uid=uid,
        issued_at=issued_at,
        salt=salt,
        privilege_expiry=privilege_expiry,
        message=raw[:message_len],
        signature=raw[message_len:],
    )


def verify_signature(parsed: ParsedToken, app_certificate: str) -> bool:
    return hmac.compare_digest(sign(parsed.message, app_certificate), parsed.signature)
