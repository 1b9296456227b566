"""
Cookie transports used by SessionStore.

ResponseCookieTransport is bound to one request/response cycle: it reads the
inbound cookies and writes Set-Cookie headers on the outgoing response.
RequestCookieTransport is read-only and wraps the cookies of an arbitrary
inbound request (middleware, background verification).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Literal, Mapping, Optional, Protocol

from starlette.requests import Request, cookie_parser
from starlette.responses import Response

SameSite = Literal["lax", "strict", "none"]


@dataclass(frozen=True)
class CookieOptions:
    expires: datetime
    httponly: bool = True
    samesite: SameSite = "lax"
    path: str = "/"
    secure: bool = False


class ReadableCookies(Protocol):
    def get(self, name: str) -> Optional[str]: ...


class CookieTransport(ReadableCookies, Protocol):
    def set(self, name: str, value: str, options: CookieOptions) -> None: ...

    def delete(self, name: str, path: str = "/") -> None: ...


class RequestCookieTransport:
    def __init__(self, cookies: Mapping[str, str]):
        self._cookies = dict(cookies)

    @classmethod
    def from_header(cls, header: Optional[str]) -> "RequestCookieTransport":
        return cls(cookie_parser(header or ""))

    @classmethod
    def from_request(cls, request: Request) -> "RequestCookieTransport":
        return cls(request.cookies)

    def get(self, name: str) -> Optional[str]:
        return self._cookies.get(name)


class ResponseCookieTransport:
    """
    Reads fall through to the inbound request unless the cookie was set or
    deleted earlier in the same cycle.
    """

    def __init__(self, request: Request, response: Response):
        self.request = request
        self.response = response
        self._pending: Dict[str, Optional[str]] = {}

    def get(self, name: str) -> Optional[str]:
        if name in self._pending:
            return self._pending[name]
        return self.request.cookies.get(name)

    def set(self, name: str, value: str, options: CookieOptions) -> None:
        self.response.set_cookie(
            name,
            value,
            expires=options.expires,
            path=options.path,
            secure=options.secure,
            httponly=options.httponly,
            samesite=options.samesite,
        )
        self._pending[name] = value

    def delete(self, name: str, path: str = "/") -> None:
        self.response.delete_cookie(name, path=path)
        self._pending[name] = None
