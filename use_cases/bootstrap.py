"""Startup orchestration: configuration, observability and storage initialisation."""

from dataclasses import dataclass
from typing import Optional, Tuple

import logging

import auth
from infrastructure import config
from infrastructure.observability import setup_observability

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class StartupResult:
    """Result contract for startup/bootstrap orchestration."""

    planned_steps: Tuple[str, ...]
    settings: Optional[config.Settings] = None


def run_startup(init_storage: bool = True) -> StartupResult:
    """
    Runs once per process. A ConfigurationError propagates: a missing signing
    secret outside development must stop the process, not individual requests.

    init_storage=False is the Streamlit client: it owns no storage and signs no
    tokens, so it loads settings without requiring SESSION_SECRET.
    """
    executed_steps = []

    setup_observability()
    executed_steps.append("setup_observability")

    if init_storage:
        settings = config.get_settings()
    else:
        settings = config.get_client_settings()
    executed_steps.append("load_settings")
    log.info(f"Starting in {settings.environment} mode")

    if init_storage:
        auth.init_auth_db()
        executed_steps.append("init_auth_db")
        auth.init_projects_db()
        executed_steps.append("init_projects_db")

    return StartupResult(planned_steps=tuple(executed_steps), settings=settings)
