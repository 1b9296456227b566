import logging
from datetime import datetime, timezone

import pytest

import auth
from infrastructure import config


@pytest.fixture(scope="session")
def anyio_backend():
    """Async tests run on asyncio only."""
    return "asyncio"


@pytest.fixture(autouse=True)
def setup_test_logging(caplog):
    caplog.set_level(logging.DEBUG)


@pytest.fixture
def settings(tmp_path):
    test_settings = config.Settings(
        session_secret="test-secret",
        environment="test",
        users_db=str(tmp_path / "users.db"),
        projects_db=str(tmp_path / "projects.db"),
    )
    config.override_settings(test_settings)
    auth.reset_caches()
    yield test_settings
    config.override_settings(None)
    auth.reset_caches()


@pytest.fixture
def test_db(settings):
    auth.init_auth_db()
    auth.init_projects_db()
    yield settings


class FrozenClock:
    def __init__(self, moment=None):
        self.moment = moment or datetime(2026, 3, 14, 9, 5, 7, 123456, tzinfo=timezone.utc)

    def __call__(self):
        return self.moment

    def advance(self, delta):
        self.moment = self.moment + delta


@pytest.fixture
def clock():
    return FrozenClock()


class FakeCookies:
    """In-memory CookieTransport recording every set/delete call."""

    def __init__(self, initial=None):
        self.jar = dict(initial or {})
        self.set_calls = []
        self.delete_calls = []

    def get(self, name):
        return self.jar.get(name)

    def set(self, name, value, options):
        self.set_calls.append((name, value, options))
        self.jar[name] = value

    def delete(self, name, path="/"):
        self.delete_calls.append((name, path))
        self.jar.pop(name, None)


@pytest.fixture
def cookies():
    return FakeCookies()
