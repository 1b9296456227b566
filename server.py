"""
HTTP API: credential actions, session lookup and the project service.

Run with `python server.py` (uvicorn) after configuring SESSION_SECRET / APP_ENV.
"""

import json
import logging
from typing import Iterable

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

import auth
from infrastructure.session.cookie_transport import RequestCookieTransport, ResponseCookieTransport
from use_cases import bootstrap
from use_cases.session_models import session_to_dict

log = logging.getLogger(__name__)

PROTECTED_PREFIXES = ("/api/projects",)


def _unauthorized_body() -> bytes:
    return json.dumps({"error": "Authentication required"}).encode("utf-8")


class SessionVerificationMiddleware:
    """
    Verifies the `auth-token` cookie of every request under the protected
    prefixes. The decoded session is stored in scope["state"]["session"];
    requests without a valid session get a 401 before reaching the app.
    """

    def __init__(self, app, *, protected_prefixes: Iterable[str] = PROTECTED_PREFIXES):
        self.app = app
        self.protected_prefixes = tuple(protected_prefixes)

    def _is_protected(self, path: str) -> bool:
        return any(path == prefix or path.startswith(prefix + "/") for prefix in self.protected_prefixes)

    async def __call__(self, scope, receive, send):
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        if not self._is_protected(scope.get("path", "")):
            await self.app(scope, receive, send)
            return

        cookie_header = None
        for key, value in scope.get("headers") or []:
            if key.lower() == b"cookie":
                cookie_header = value.decode("latin-1")
                break

        session = auth.verify_session(RequestCookieTransport.from_header(cookie_header))
        if session is None:
            body = _unauthorized_body()
            await send({
                "type": "http.response.start",
                "status": 401,
                "headers": [
                    (b"content-type", b"application/json"),
                    (b"content-length", str(len(body)).encode("ascii")),
                ],
            })
            await send({"type": "http.response.body", "body": body})
            return

        scope.setdefault("state", {})["session"] = session
        await self.app(scope, receive, send)


async def _read_json(request: Request):
    try:
        payload = await request.json()
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=400)


async def _credential_endpoint(request: Request, action) -> Response:
    payload = await _read_json(request)
    if payload is None:
        return _bad_request("Expected a JSON object body")
    email = payload.get("email")
    password = payload.get("password")
    if not all(value is None or isinstance(value, str) for value in (email, password)):
        return _bad_request("email and password must be strings")
    response = JSONResponse(None)
    cookies = ResponseCookieTransport(request, response)
    result = await run_in_threadpool(action, email, password, cookies)
    response.body = response.render(result.to_dict())
    response.headers["content-length"] = str(len(response.body))
    return response


async def sign_in(request: Request) -> Response:
    return await _credential_endpoint(request, auth.sign_in_action)


async def sign_up(request: Request) -> Response:
    return await _credential_endpoint(request, auth.sign_up_action)


async def sign_out(request: Request) -> Response:
    response = JSONResponse({"success": True})
    auth.sign_out_action(ResponseCookieTransport(request, response))
    return response


async def current_session(request: Request) -> Response:
    session = auth.verify_session(RequestCookieTransport.from_request(request))
    return JSONResponse({"session": session_to_dict(session) if session else None})


async def list_projects(request: Request) -> Response:
    session = request.state.session
    projects = await run_in_threadpool(auth.get_project_repo().list_projects, session.user_id)
    return JSONResponse({"projects": [p.to_dict() for p in projects]})


async def create_project(request: Request) -> Response:
    session = request.state.session
    payload = await _read_json(request)
    if payload is None or not isinstance(payload.get("name"), str) or not payload["name"].strip():
        return _bad_request("Project name is required")
    messages = payload.get("messages") or []
    data = payload.get("data") or {}
    if not isinstance(messages, list) or not isinstance(data, dict):
        return _bad_request("messages must be a list and data an object")
    project = await run_in_threadpool(
        auth.get_project_repo().create_project, session.user_id, payload["name"], messages, data
    )
    return JSONResponse(project.to_dict(), status_code=201)


async def get_project(request: Request) -> Response:
    session = request.state.session
    project = await run_in_threadpool(
        auth.get_project_repo().get_project, session.user_id, request.path_params["project_id"]
    )
    if project is None:
        return JSONResponse({"error": "Project not found"}, status_code=404)
    return JSONResponse(project.to_dict())


async def health(request: Request) -> Response:
    return JSONResponse({"status": "ok"})


def create_app() -> Starlette:
    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/api/auth/sign-in", sign_in, methods=["POST"]),
        Route("/api/auth/sign-up", sign_up, methods=["POST"]),
        Route("/api/auth/sign-out", sign_out, methods=["POST"]),
        Route("/api/auth/session", current_session, methods=["GET"]),
        Route("/api/projects", list_projects, methods=["GET"]),
        Route("/api/projects", create_project, methods=["POST"]),
        Route("/api/projects/{project_id}", get_project, methods=["GET"]),
    ]
    return Starlette(routes=routes, middleware=[Middleware(SessionVerificationMiddleware)])


def main():
    import uvicorn

    startup = bootstrap.run_startup()
    settings = startup.settings
    uvicorn.run(create_app(), host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
