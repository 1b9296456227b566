"""
Signed session tokens.

Tokens use the HS256 compact layout: base64url(header).base64url(claims).base64url(signature),
where the signature is HMAC-SHA256 over the first two segments.
"""

import base64
import hashlib
import hmac
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from use_cases.session_models import SessionClaims

log = logging.getLogger(__name__)

SESSION_TTL_DAYS = 7
SESSION_TTL = timedelta(days=SESSION_TTL_DAYS)
_HEADER = {"alg": "HS256", "typ": "JWT"}


class InvalidToken(Exception):
    """Bad signature, malformed structure or expired claims."""


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _encode_b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _decode_b64(data: str) -> bytes:
    pad = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + pad)


def _encode_segment(obj) -> str:
    return _encode_b64(json.dumps(obj, separators=(",", ":"), sort_keys=True).encode("utf-8"))


class TokenCodec:
    def __init__(self, secret: str, clock: Optional[Callable[[], datetime]] = None):
        if not secret:
            raise ValueError("TokenCodec requires a non-empty signing secret")
        self._secret = secret.encode("utf-8")
        self._clock = clock or utc_now

    def _sign(self, signing_input: str) -> str:
        digest = hmac.new(self._secret, signing_input.encode("utf-8"), hashlib.sha256).digest()
        return _encode_b64(digest)

    def encode(self, claims: SessionClaims) -> str:
        issued_at = self._clock()
        payload = {
            "userId": claims.user_id,
            "email": claims.email,
            "iat": issued_at.timestamp(),
            "exp": claims.expires_at.timestamp(),
        }
        signing_input = f"{_encode_segment(_HEADER)}.{_encode_segment(payload)}"
        return f"{signing_input}.{self._sign(signing_input)}"

    def decode(self, token: str) -> SessionClaims:
        try:
            header_b64, payload_b64, signature = token.split(".")
        except (AttributeError, ValueError) as e:
            raise InvalidToken("malformed token") from e

        expected = self._sign(f"{header_b64}.{payload_b64}")
        if not hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8")):
            raise InvalidToken("signature mismatch")

        try:
            header = json.loads(_decode_b64(header_b64))
            payload = json.loads(_decode_b64(payload_b64))
            if header.get("alg") != _HEADER["alg"]:
                raise InvalidToken(f"unsupported algorithm {header.get('alg')!r}")
            user_id = payload["userId"]
            email = payload["email"]
            expires_at = datetime.fromtimestamp(float(payload["exp"]), tz=timezone.utc)
        except InvalidToken:
            raise
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            raise InvalidToken("malformed claims") from e

        if not isinstance(user_id, str) or not isinstance(email, str):
            raise InvalidToken("malformed claims")
        if expires_at <= self._clock():
            raise InvalidToken("token expired")

        return SessionClaims(user_id=user_id, email=email, expires_at=expires_at)
