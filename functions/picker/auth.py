"""
Admin login and bearer credential checks.

A credential is ``base64("<password>:<issued_at_millis>")``. It is a pure
function of the admin password, so no session state is kept on the server.
"""

from __future__ import annotations

import base64
import binascii
import hmac
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from picker.errors import Unauthorized

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def _millis(clock: Callable[[], float]) -> int:
    return int(clock() * 1000)


def credential_from_header(value: Optional[str]) -> Optional[str]:
    """Return the credential from an ``Authorization: Bearer ...`` header."""
    if not value or not value.startswith(BEARER_PREFIX):
        return None
    return value[len(BEARER_PREFIX):].strip() or None


@dataclass
class CredentialChecker:
    """Issues and verifies admin credentials against the configured password."""

    admin_password: Optional[str]
    token_ttl_seconds: Optional[int] = None
    clock: Callable[[], float] = field(default=time.time, repr=False)

    def _matches(self, secret) -> bool:
        if not self.admin_password or not isinstance(secret, str):
            return False
        return hmac.compare_digest(
            secret.encode("utf-8"), self.admin_password.encode("utf-8")
        )

    def authenticate(self, secret) -> str:
        """
        Exchange the admin password for a bearer credential.

        Raises:
            Unauthorized: if ``secret`` is not the configured password, or no
                password is configured at all.
        """
        if not self._matches(secret):
            logger.info("Rejected admin login attempt")
            raise Unauthorized("Invalid password")
        raw = f"{secret}:{_millis(self.clock)}"
        return base64.b64encode(raw.encode("utf-8")).decode("ascii")

    def verify(self, credential: Optional[str]) -> bool:
        if not credential:
            return False
        try:
            decoded = base64.b64decode(credential, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError, ValueError):
            return False

        secret, sep, issued = decoded.rpartition(":")
        if not sep or not self._matches(secret):
            return False

        if self.token_ttl_seconds is not None:
            try:
                issued_at = int(issued)
            except ValueError:
                return False
            age_ms = _millis(self.clock) - issued_at
            if age_ms > self.token_ttl_seconds * 1000:
                logger.info("Rejected expired credential (age %.0fs)", age_ms / 1000)
                return False
        return True

    def require(self, credential: Optional[str]) -> None:
        """Raise ``Unauthorized`` unless ``credential`` verifies."""
        if not self.verify(credential):
            raise Unauthorized()
