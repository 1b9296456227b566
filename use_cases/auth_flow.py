"""Authentication flow orchestration (application layer)."""

import logging
import random
from datetime import datetime
from typing import Awaitable, Callable, Optional, Protocol, Sequence

from use_cases import continuity
from use_cases.domain_models import AnonWorkSnapshot, NavigationTarget, Project, ProjectCreateInput, has_anon_work
from use_cases.session_models import AuthResult

log = logging.getLogger(__name__)


class CredentialActions(Protocol):
    """Verifies credentials and establishes the session cookie on success."""

    async def sign_in(self, email: str, password: str) -> AuthResult: ...

    async def sign_up(self, email: str, password: str) -> AuthResult: ...


class ProjectService(Protocol):
    async def list_projects(self) -> Sequence[Project]:
        """Projects of the signed-in user, most recently active first."""
        ...

    async def create_project(self, project: ProjectCreateInput) -> Project: ...


class AnonWorkTracker(Protocol):
    def read(self) -> Optional[AnonWorkSnapshot]: ...

    def clear(self) -> None: ...


Navigate = Callable[[NavigationTarget], None]
CredentialCall = Callable[[str, str], Awaitable[AuthResult]]


class AuthOrchestrator:
    """
    Entry points for sign-in and sign-up.

    `is_loading` is True for the whole call, continuity side effects included,
    and False again on every exit path. It is an advisory UI signal: concurrent
    calls are not serialized.
    """

    def __init__(
        self,
        credentials: CredentialActions,
        projects: ProjectService,
        anon_work: AnonWorkTracker,
        navigate: Navigate,
        *,
        clock: Callable[[], datetime] = datetime.now,
        rng: Optional[random.Random] = None,
    ):
        self.credentials = credentials
        self.projects = projects
        self.anon_work = anon_work
        self.navigate = navigate
        self._clock = clock
        self._rng = rng or random.Random()
        self._loading = False

    @property
    def is_loading(self) -> bool:
        return self._loading

    async def sign_in(self, email: str, password: str) -> AuthResult:
        return await self._authenticate(self.credentials.sign_in, email, password)

    async def sign_up(self, email: str, password: str) -> AuthResult:
        return await self._authenticate(self.credentials.sign_up, email, password)

    async def _authenticate(self, action: CredentialCall, email: str, password: str) -> AuthResult:
        self._loading = True
        try:
            result = await action(email, password)
            if result.success:
                await self._handle_post_sign_in()
            return result
        finally:
            self._loading = False

    async def _handle_post_sign_in(self) -> NavigationTarget:
        snapshot = self.anon_work.read()
        # Projects are only listed when there is no anonymous work to merge.
        existing = [] if has_anon_work(snapshot) else await self.projects.list_projects()

        plan = continuity.resolve(snapshot, existing, now=self._clock(), rng=self._rng)

        target = plan.target
        if plan.create is not None:
            created = await self.projects.create_project(plan.create)
            target = NavigationTarget(project_id=created.id)
        if plan.clear_anon:
            self.anon_work.clear()

        log.info(f"Continuity resolved: {plan.outcome} -> project {target.project_id}")
        self.navigate(target)
        return target
