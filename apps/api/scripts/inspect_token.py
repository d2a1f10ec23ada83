"""Decode an RTC token and optionally verify its signature.

Usage: python scripts/inspect_token.py <token>

When AGORA_APP_CERTIFICATE is configured the signature is checked as well.
"""
from __future__ import annotations

import argparse
import sys
from datetime import datetime, timezone

from calltoken.core.config import settings
from calltoken.services.rtc import TokenFormatError, parse_token, verify_signature


def main(argv: list[str] | None = None) -> int:
	parser = argparse.ArgumentParser(description="Decode an RTC token.")
	parser.add_argument("token", help="base64 token as returned by /api/rtc/token")
	args = parser.parse_args(argv)

	try:
		parsed = parse_token(args.token)
	except TokenFormatError as exc:
		print(f"error: {exc}", file=sys.stderr)
		return 1

	expiry = datetime.fromtimestamp(parsed.privilege_expiry, tz=timezone.utc)
	print(f"version:      {parsed.version}")
	print(f"service_type: {parsed.service_type}")
	print(f"app_id:       {parsed.app_id}")
	print(f"channel:      {parsed.channel_name}")
	print(f"uid:          {parsed.uid}")
	print(f"issued_at:    {parsed.issued_at}")
	print(f"salt:         {parsed.salt}")
	print(f"expires:      {parsed.privilege_expiry} ({expiry.isoformat()})")

	certificate = settings.agora_app_certificate.get_secret_value()
	if not certificate:
		print("signature:    not checked (AGORA_APP_CERTIFICATE unset)")
		return 0

	valid = verify_signature(parsed, certificate)
	print(f"signature:    {'valid' if valid else 'INVALID'}")
	return 0 if valid else 2


if __name__ == "__main__":
	sys.exit(main())
