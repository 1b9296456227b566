import logging
import sqlite3

log = logging.getLogger(__name__)


class SQLiteUserRepository:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _conn(self):
        return sqlite3.connect(self.db_path)

    def _get_current_version(self, conn) -> int:
        row = conn.execute("SELECT version FROM schema_info").fetchone()
        return row[0] if row else 0

    def _migrate_v1(self, conn):
        """Baseline schema (v1)."""
        conn.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                email TEXT NOT NULL UNIQUE,
                password_salt TEXT NOT NULL,
                password_hash TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """)

    def init_auth_db(self):
        MIGRATIONS = [self._migrate_v1]

        with self._conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_info (
                    version INTEGER NOT NULL
                )
            """)

            current_version = self._get_current_version(conn)
            has_version_row = conn.execute("SELECT COUNT(*) FROM schema_info").fetchone()[0] > 0
            if not has_version_row:
                conn.execute("INSERT INTO schema_info (version) VALUES (?)", (current_version,))

            for i in range(current_version, len(MIGRATIONS)):
                target_version = i + 1
                try:
                    MIGRATIONS[i](conn)
                    conn.execute("UPDATE schema_info SET version = ?", (target_version,))
                except Exception as e:
                    # Leaving the block without commit rolls back every step applied in this call.
                    raise RuntimeError(f"Users database migration to v{target_version} failed: {e}") from e
                log.info(f"Users database migrated to v{target_version} ({self.db_path})")

            conn.commit()

    def get_user_by_email(self, email: str):
        with self._conn() as conn:
            row = conn.execute("""
                SELECT id, email, password_salt, password_hash, created_at
                FROM users WHERE email = ?
            """, (email,)).fetchone()
            if row:
                return {
                    "id": row[0], "email": row[1], "password_salt": row[2],
                    "password_hash": row[3], "created_at": row[4],
                }
            return None

    def create_user(self, user_id, email, salt_hex, pw_hash, created_at):
        with self._conn() as conn:
            try:
                conn.execute("""
                    INSERT INTO users (id, email, password_salt, password_hash, created_at)
                    VALUES (?, ?, ?, ?, ?)
                """, (user_id, email, salt_hex, pw_hash, created_at))
                conn.commit()
                return True, None
            except sqlite3.IntegrityError:
                return False, "integrity_error"
