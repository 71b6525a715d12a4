"""
Pseudonymous, day-scoped visitor fingerprints.

A fingerprint is HMAC-SHA256(secret, "ip|user_agent|YYYY-MM-DD") cut to 32
hex chars. It is stable for one UTC day and changes at midnight, which is
what lets a (path, day, fingerprint) uniqueness constraint deduplicate
repeat visits without storing the IP or User-Agent.
"""

from __future__ import annotations

import hashlib
import hmac
from datetime import date, datetime, timezone

from .errors import ConfigurationError

FINGERPRINT_LENGTH = 32


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class Fingerprinter:
    def __init__(self, secret: str) -> None:
        key = (secret or "").encode("utf-8")
        if not key:
            raise ConfigurationError("Fingerprint secret is empty.")
        self._key = key

    def fingerprint(self, ip: str | None, user_agent: str | None, day: date) -> str:
        data = f"{ip or ''}|{user_agent or ''}|{day.isoformat()}".encode("utf-8")
        digest = hmac.new(self._key, data, hashlib.sha256).hexdigest()
        return digest[:FINGERPRINT_LENGTH]
