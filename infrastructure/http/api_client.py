import logging
from typing import List, Optional

from anyio import to_thread
import requests

from use_cases.domain_models import Project, ProjectCreateInput
from use_cases.session_models import AuthResult

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class ApiError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ApiClient:
    """
    Client side of the HTTP API. The underlying requests.Session keeps the
    `auth-token` cookie set by the server, so project calls made after a
    successful sign-in are authenticated.

    Blocking requests run in a worker thread so the coroutine methods can be
    used as the credential and project-service collaborators.
    """

    def __init__(self, base_url: str, http: Optional[requests.Session] = None, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.http = http or requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request(self, method: str, path: str, json=None) -> requests.Response:
        try:
            resp = self.http.request(method, self._url(path), json=json, timeout=self.timeout)
        except requests.RequestException as e:
            log.error(f"Network error calling {method} {path}: {e}")
            raise ApiError(f"Network error: {e}") from e
        return resp

    @staticmethod
    def _error_message(resp: requests.Response) -> str:
        try:
            return resp.json().get("error") or resp.reason
        except ValueError:
            return resp.reason or f"HTTP {resp.status_code}"

    def _credential_call(self, path: str, email: str, password: str) -> AuthResult:
        resp = self._request("POST", path, json={"email": email, "password": password})
        if resp.status_code != 200:
            raise ApiError(f"{path} failed: {self._error_message(resp)}", resp.status_code)
        return AuthResult.from_dict(resp.json())

    def sign_in_sync(self, email: str, password: str) -> AuthResult:
        return self._credential_call("/api/auth/sign-in", email, password)

    def sign_up_sync(self, email: str, password: str) -> AuthResult:
        return self._credential_call("/api/auth/sign-up", email, password)

    def sign_out_sync(self) -> None:
        resp = self._request("POST", "/api/auth/sign-out")
        if resp.status_code != 200:
            raise ApiError(f"Sign-out failed: {self._error_message(resp)}", resp.status_code)

    def list_projects_sync(self) -> List[Project]:
        resp = self._request("GET", "/api/projects")
        if resp.status_code != 200:
            raise ApiError(f"Listing projects failed: {self._error_message(resp)}", resp.status_code)
        return [Project.from_dict(p) for p in resp.json().get("projects", [])]

    def create_project_sync(self, project: ProjectCreateInput) -> Project:
        body = {"name": project.name, "messages": project.messages, "data": project.data}
        resp = self._request("POST", "/api/projects", json=body)
        if resp.status_code != 201:
            raise ApiError(f"Creating project failed: {self._error_message(resp)}", resp.status_code)
        return Project.from_dict(resp.json())

    async def sign_in(self, email: str, password: str) -> AuthResult:
        return await to_thread.run_sync(self.sign_in_sync, email, password)

    async def sign_up(self, email: str, password: str) -> AuthResult:
        return await to_thread.run_sync(self.sign_up_sync, email, password)

    async def list_projects(self) -> List[Project]:
        """Projects of the signed-in user, most recently active first."""
        return await to_thread.run_sync(self.list_projects_sync)

    async def create_project(self, project: ProjectCreateInput) -> Project:
        return await to_thread.run_sync(self.create_project_sync, project)
