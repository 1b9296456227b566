import sqlite3
import time

from infrastructure.repositories.sqlite_project_repository import SQLiteProjectRepository
from infrastructure.repositories.sqlite_user_repository import SQLiteUserRepository


def test_user_migration_from_empty(tmp_path):
    db_file = tmp_path / "empty.db"
    repo = SQLiteUserRepository(str(db_file))

    repo.init_auth_db()

    with sqlite3.connect(str(db_file)) as conn:
        version = conn.execute("SELECT version FROM schema_info").fetchone()[0]
        assert version == 1
        tables = {t[0] for t in conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()}
        assert {"schema_info", "users"}.issubset(tables)


def test_user_migration_is_idempotent(tmp_path):
    repo = SQLiteUserRepository(str(tmp_path / "users.db"))
    repo.init_auth_db()
    repo.create_user("u1", "a@example.com", "00", "hash", "2026-01-01T00:00:00")

    repo.init_auth_db()

    with sqlite3.connect(repo.db_path) as conn:
        assert conn.execute("SELECT COUNT(*) FROM schema_info").fetchone()[0] == 1
    assert repo.get_user_by_email("a@example.com")["id"] == "u1"


def test_duplicate_email_reports_integrity_error(tmp_path):
    repo = SQLiteUserRepository(str(tmp_path / "users.db"))
    repo.init_auth_db()
    assert repo.create_user("u1", "a@example.com", "00", "hash", "2026-01-01") == (True, None)
    assert repo.create_user("u2", "a@example.com", "00", "hash", "2026-01-01") == (False, "integrity_error")


def test_projects_listed_most_recent_first(tmp_path):
    repo = SQLiteProjectRepository(str(tmp_path / "projects.db"))
    repo.init_projects_db()

    first = repo.create_project("user-1", "First", [], {})
    time.sleep(0.002)
    second = repo.create_project("user-1", "Second", [{"role": "user", "content": "hi"}], {"files": {}})
    repo.create_project("user-2", "Someone else", [], {})

    listed = repo.list_projects("user-1")

    assert [p.id for p in listed] == [second.id, first.id]
    assert listed[0].messages == [{"role": "user", "content": "hi"}]
    assert listed[0].data == {"files": {}}


def test_get_project_is_scoped_to_owner(tmp_path):
    repo = SQLiteProjectRepository(str(tmp_path / "projects.db"))
    repo.init_projects_db()
    project = repo.create_project("user-1", "Mine", [], {})

    assert repo.get_project("user-1", project.id).name == "Mine"
    assert repo.get_project("user-2", project.id) is None
