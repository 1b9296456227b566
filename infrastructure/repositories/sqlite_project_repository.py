import json
import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from use_cases.domain_models import Project

log = logging.getLogger(__name__)


class SQLiteProjectRepository:
    """
    Persistent project store.

    list_projects() returns the most recently active project first; the
    continuity resolver relies on that order and never re-sorts.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _conn(self):
        return sqlite3.connect(self.db_path)

    def init_projects_db(self):
        with self._conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS projects (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    messages TEXT NOT NULL DEFAULT '[]',
                    data TEXT NOT NULL DEFAULT '{}',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_projects_user_updated ON projects (user_id, updated_at)")
            conn.commit()

    @staticmethod
    def _row_to_project(row) -> Project:
        return Project(
            id=row[0],
            name=row[1],
            messages=json.loads(row[2]),
            data=json.loads(row[3]),
            created_at=datetime.fromisoformat(row[4]),
            updated_at=datetime.fromisoformat(row[5]),
        )

    def list_projects(self, user_id: str) -> List[Project]:
        with self._conn() as conn:
            rows = conn.execute("""
                SELECT id, name, messages, data, created_at, updated_at
                FROM projects
                WHERE user_id = ?
                ORDER BY updated_at DESC, created_at DESC, rowid DESC
            """, (user_id,)).fetchall()
        return [self._row_to_project(r) for r in rows]

    def create_project(self, user_id: str, name: str, messages: List[Any], data: Dict[str, Any]) -> Project:
        project_id = uuid.uuid4().hex
        now_iso = datetime.now(timezone.utc).isoformat()
        with self._conn() as conn:
            conn.execute("""
                INSERT INTO projects (id, user_id, name, messages, data, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (project_id, user_id, name, json.dumps(messages), json.dumps(data), now_iso, now_iso))
            conn.commit()
        log.info(f"Project {project_id} created for user {user_id}: {name!r}")
        return Project(
            id=project_id,
            name=name,
            messages=list(messages),
            data=dict(data),
            created_at=datetime.fromisoformat(now_iso),
            updated_at=datetime.fromisoformat(now_iso),
        )

    def get_project(self, user_id: str, project_id: str):
        with self._conn() as conn:
            row = conn.execute("""
                SELECT id, name, messages, data, created_at, updated_at
                FROM projects WHERE user_id = ? AND id = ?
            """, (user_id, project_id)).fetchone()
        return self._row_to_project(row) if row else None
