import sqlite3
from datetime import datetime, timezone


class SQLiteProfileRepository:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _conn(self):
        return sqlite3.connect(self.db_path)

    def _get_current_version(self, conn) -> int:
        row = conn.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='schema_info'").fetchone()
        if row:
            version_row = conn.execute("SELECT version FROM schema_info").fetchone()
            if version_row:
                return version_row[0]
        return 0

    def _migrate_v1(self, conn):
        """Baseline schema (v1)."""
        conn.execute("""
            CREATE TABLE IF NOT EXISTS profiles (
                user_id TEXT PRIMARY KEY,
                display_name TEXT NOT NULL,
                phone TEXT NOT NULL,
                city TEXT NOT NULL,
                completed_at TEXT,
                updated_at TEXT NOT NULL
            )
        """)

    def init_db(self):
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
                    # Raising inside the 'with' block rolls back every step of this init
                    raise RuntimeError(f"Profile database migration to v{target_version} failed: {e}") from e

            conn.commit()

    def get_profile(self, user_id: str):
        with self._conn() as conn:
            row = conn.execute("""
                SELECT user_id, display_name, phone, city, completed_at
                FROM profiles WHERE user_id = ?
            """, (user_id,)).fetchone()
            if row:
                return {
                    "user_id": row[0], "display_name": row[1], "phone": row[2],
                    "city": row[3], "completed_at": row[4]
                }
            return None

    def is_profile_complete(self, user_id: str) -> bool:
        profile = self.get_profile(user_id)
        return bool(profile and profile["completed_at"])

    def save_profile(self, user_id: str, display_name: str, phone: str, city: str) -> bool:
        """Upserts the profile and marks it complete. Keeps the first completion time."""
        now_iso = datetime.now(timezone.utc).isoformat()
        with self._conn() as conn:
            try:
                conn.execute("""
                    INSERT INTO profiles (user_id, display_name, phone, city, completed_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    ON CONFLICT(user_id) DO UPDATE SET
                    display_name = excluded.display_name,
                    phone = excluded.phone,
                    city = excluded.city,
                    completed_at = COALESCE(profiles.completed_at, excluded.completed_at),
                    updated_at = excluded.updated_at
                """, (user_id, display_name, phone, city, now_iso, now_iso))
                conn.commit()
                return True
            except sqlite3.Error:
                return False
