import logging
from datetime import datetime
from typing import Callable, Optional

from infrastructure.session.cookie_transport import CookieOptions, CookieTransport, ReadableCookies
from infrastructure.session.token_codec import SESSION_TTL, InvalidToken, TokenCodec, utc_now
from use_cases.session_models import Session, SessionClaims

log = logging.getLogger(__name__)

SESSION_COOKIE = "auth-token"


class SessionStore:
    """Binds TokenCodec to the single `auth-token` cookie."""

    def __init__(
        self,
        codec: TokenCodec,
        cookies: Optional[CookieTransport] = None,
        *,
        secure: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.codec = codec
        self.cookies = cookies
        self.secure = secure
        self._clock = clock or utc_now

    def _transport(self) -> CookieTransport:
        if self.cookies is None:
            raise RuntimeError("SessionStore is not bound to a response cycle")
        return self.cookies

    def create(self, user_id: str, email: str) -> None:
        expires_at = self._clock() + SESSION_TTL
        token = self.codec.encode(SessionClaims(user_id=user_id, email=email, expires_at=expires_at))
        self._transport().set(
            SESSION_COOKIE,
            token,
            CookieOptions(expires=expires_at, httponly=True, samesite="lax", path="/", secure=self.secure),
        )
        log.info(f"Session issued for user {user_id} (expires {expires_at.isoformat()})")

    def read(self) -> Optional[Session]:
        return self._decode_from(self._transport())

    def destroy(self) -> None:
        self._transport().delete(SESSION_COOKIE, path="/")

    def verify(self, request_cookies: ReadableCookies) -> Optional[Session]:
        return self._decode_from(request_cookies)

    def _decode_from(self, cookies: ReadableCookies) -> Optional[Session]:
        token = cookies.get(SESSION_COOKIE)
        if not token:
            return None
        try:
            return self.codec.decode(token)
        except InvalidToken as e:
            log.debug(f"Rejected session cookie: {e}")
            return None
