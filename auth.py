"""
Server-side credential actions and session facade.

The actions verify an email/password pair, establish the `auth-token` cookie
through the given cookie transport on success, and report the outcome as an
AuthResult. Credential problems never raise out of an action.
"""

from infrastructure import config
from infrastructure.repositories.sqlite_project_repository import SQLiteProjectRepository
from infrastructure.repositories.sqlite_user_repository import SQLiteUserRepository
from infrastructure.session.cookie_transport import CookieTransport, ReadableCookies
from infrastructure.session.session_store import SessionStore
from infrastructure.session.token_codec import TokenCodec
from use_cases.session_models import AuthResult
import hashlib
import hmac
import logging
import os
import uuid
from datetime import datetime, timezone

log = logging.getLogger(__name__)


class UserAlreadyExistsError(Exception):
    pass


class InvalidCredentialsError(Exception):
    pass


PASSWORD_ITERATIONS = 200_000
MIN_PASSWORD_LENGTH = 8

_user_repo = None
_project_repo = None
_codec = None


def get_user_repo() -> SQLiteUserRepository:
    global _user_repo
    db_path = config.get_settings().users_db
    if _user_repo is None or _user_repo.db_path != db_path:
        _user_repo = SQLiteUserRepository(db_path)
    return _user_repo


def get_project_repo() -> SQLiteProjectRepository:
    global _project_repo
    db_path = config.get_settings().projects_db
    if _project_repo is None or _project_repo.db_path != db_path:
        _project_repo = SQLiteProjectRepository(db_path)
    return _project_repo


def get_codec() -> TokenCodec:
    global _codec
    if _codec is None:
        _codec = TokenCodec(config.get_settings().session_secret)
    return _codec


def reset_caches():
    """Drops cached repositories and codec (after settings change)."""
    global _user_repo, _project_repo, _codec
    _user_repo = None
    _project_repo = None
    _codec = None


def init_auth_db():
    get_user_repo().init_auth_db()


def init_projects_db():
    get_project_repo().init_projects_db()


def _hash_password(password, salt_hex):
    salt = bytes.fromhex(salt_hex)
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PASSWORD_ITERATIONS).hex()


def _make_password(password):
    salt_hex = os.urandom(16).hex()
    return salt_hex, _hash_password(password, salt_hex)


def _verify_password(password, salt_hex, expected_hash):
    candidate = _hash_password(password, salt_hex)
    return hmac.compare_digest(candidate, expected_hash)


def _normalize_email(email):
    return (email or "").strip().lower()


# --- Session facade ---

def session_store(cookies=None) -> SessionStore:
    return SessionStore(get_codec(), cookies, secure=config.get_settings().is_production)


def create_session(user_id, email, cookies: CookieTransport):
    session_store(cookies).create(user_id, email)


def get_session(cookies: CookieTransport):
    return session_store(cookies).read()


def delete_session(cookies: CookieTransport):
    session_store(cookies).destroy()


def verify_session(request_cookies: ReadableCookies):
    return session_store().verify(request_cookies)


# --- Users ---

def create_user(email, password):
    email = _normalize_email(email)
    salt_hex, pw_hash = _make_password(password)
    user_id = uuid.uuid4().hex
    created_at = datetime.now(timezone.utc).isoformat()
    success, err = get_user_repo().create_user(user_id, email, salt_hex, pw_hash, created_at)
    if not success and err == "integrity_error":
        raise UserAlreadyExistsError("Email already registered")
    log.info(f"User {user_id} registered")
    return {"id": user_id, "email": email}


def authenticate_user(email, password):
    email = _normalize_email(email)
    user = get_user_repo().get_user_by_email(email)
    if not user:
        raise InvalidCredentialsError("Invalid credentials")
    if not _verify_password(password, user["password_salt"], user["password_hash"]):
        raise InvalidCredentialsError("Invalid credentials")
    return user


# --- Credential actions ---

def sign_up_action(email, password, cookies: CookieTransport) -> AuthResult:
    if not email or not password:
        return AuthResult(success=False, error="Email and password are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        return AuthResult(success=False, error=f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    try:
        user = create_user(email, password)
    except UserAlreadyExistsError as e:
        return AuthResult(success=False, error=str(e))

    create_session(user["id"], user["email"], cookies)
    return AuthResult(success=True)


def sign_in_action(email, password, cookies: CookieTransport) -> AuthResult:
    if not email or not password:
        return AuthResult(success=False, error="Email and password are required")
    try:
        user = authenticate_user(email, password)
    except InvalidCredentialsError as e:
        log.info("Sign-in rejected: invalid credentials")
        return AuthResult(success=False, error=str(e))

    create_session(user["id"], user["email"], cookies)
    return AuthResult(success=True)


def sign_out_action(cookies: CookieTransport) -> None:
    delete_session(cookies)
