"""Process-wide configuration read from Streamlit secrets and the environment."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

import streamlit as st
from streamlit.errors import StreamlitAPIException

log = logging.getLogger(__name__)

DEVELOPMENT_SECRET = "development-secret-key"
PRODUCTION = "production"
DEVELOPMENT = "development"


class ConfigurationError(Exception):
    pass


def get_secret(key):
    try:
        return st.secrets.get(key)
    except (FileNotFoundError, StreamlitAPIException):
        return None


def get_value(key, default=None):
    return get_secret(key) or os.getenv(key) or default


@dataclass(frozen=True)
class Settings:
    session_secret: str
    environment: str = DEVELOPMENT
    users_db: str = "users.db"
    projects_db: str = "projects.db"
    api_base_url: str = "http://127.0.0.1:8000"
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    @property
    def is_production(self) -> bool:
        return self.environment == PRODUCTION


def load_settings(require_secret: bool = True) -> Settings:
    """
    Reads configuration once. A missing SESSION_SECRET is only tolerated in
    development, where the well-known development key is used instead.

    With require_secret=False (the Streamlit client, which never signs tokens)
    a missing secret is left empty in every environment.
    """
    environment = (get_value("APP_ENV", DEVELOPMENT)).strip().lower()
    secret = get_value("SESSION_SECRET")
    if not secret and not require_secret:
        secret = ""
    elif not secret:
        if environment != DEVELOPMENT:
            raise ConfigurationError(f"SESSION_SECRET is not set (APP_ENV={environment})")
        log.warning("SESSION_SECRET not set, using the development signing key.")
        secret = DEVELOPMENT_SECRET

    return Settings(
        session_secret=secret,
        environment=environment,
        users_db=get_value("USERS_DB", "users.db"),
        projects_db=get_value("PROJECTS_DB", "projects.db"),
        api_base_url=get_value("API_BASE_URL", "http://127.0.0.1:8000").rstrip("/"),
        api_host=get_value("API_HOST", "127.0.0.1"),
        api_port=int(get_value("API_PORT", 8000)),
    )


_settings: Optional[Settings] = None
_client_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def get_client_settings() -> Settings:
    """Settings for the API client; full settings win when already loaded."""
    global _client_settings
    if _settings is not None:
        return _settings
    if _client_settings is None:
        _client_settings = load_settings(require_secret=False)
    return _client_settings


def override_settings(settings: Optional[Settings]) -> None:
    """Replaces the cached settings (None forces a reload on next access)."""
    global _settings, _client_settings
    _settings = settings
    _client_settings = None
