"""Application layer contracts for orchestrating high-level flows."""

from .auth_flow import AnonWorkTracker, AuthOrchestrator, CredentialActions, ProjectService
from .continuity import ContinuityPlan, anon_project_name, format_clock_time, fresh_project_name, resolve
from .domain_models import AnonWorkSnapshot, ContinuityOutcome, NavigationTarget, Project, ProjectCreateInput, has_anon_work
from .session_models import AuthResult, Session, SessionClaims

__all__ = [
    "AnonWorkSnapshot",
    "AnonWorkTracker",
    "AuthOrchestrator",
    "AuthResult",
    "ContinuityOutcome",
    "ContinuityPlan",
    "CredentialActions",
    "NavigationTarget",
    "Project",
    "ProjectCreateInput",
    "ProjectService",
    "Session",
    "SessionClaims",
    "anon_project_name",
    "format_clock_time",
    "fresh_project_name",
    "has_anon_work",
    "resolve",
]
