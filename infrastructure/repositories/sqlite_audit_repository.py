import sqlite3
import json
from typing import Optional, Dict, Any
from datetime import datetime, timezone
import logging
from enum import Enum

log = logging.getLogger(__name__)

class AuditAction(str, Enum):
    SIGN_IN_STARTED = "SIGN_IN_STARTED"
    SIGN_IN_SUCCESS = "SIGN_IN_SUCCESS"
    SIGN_IN_FAIL = "SIGN_IN_FAIL"
    SIGN_OUT = "SIGN_OUT"
    PROFILE_COMPLETED = "PROFILE_COMPLETED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    STALE_EVENT_DISCARDED = "STALE_EVENT_DISCARDED"

ALLOWED_METADATA_KEYS = {
    "reason", "attempt", "status", "error_message"
}

class SQLiteAuditRepository:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _conn(self):
        return sqlite3.connect(self.db_path)

    def init_db(self):
        with self._conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS audit_log (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    ts TEXT NOT NULL,
                    actor_user_id TEXT,
                    action TEXT NOT NULL,
                    target_type TEXT NOT NULL,
                    metadata_json TEXT,
                    result TEXT NOT NULL
                )
            """)
            conn.commit()

    def log_action(
        self,
        action: Any,
        target_type: str,
        actor_user_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        result: str = "success"
    ):
        """Logs an action to the audit repository. Metadata is JSON serialized and constrained."""
        try:
            meta_str = None
            if metadata is not None:
                safe_meta = {}
                for k, v in metadata.items():
                    if k in ALLOWED_METADATA_KEYS and "password" not in str(v).lower() and "token" not in str(v).lower():
                        safe_meta[k] = v
                try:
                    meta_str = json.dumps(safe_meta)
                    if len(meta_str) > 2000:
                        safe_meta["truncated"] = True
                        meta_str = json.dumps(safe_meta)[:2000]
                except (TypeError, ValueError):
                    meta_str = "{\"error\": \"unserializable\"}"

            # Truncate strings to prevent db inflation
            ts = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
            action_val = action.value if hasattr(action, "value") else str(action)[:50]
            if not action_val:
                action_val = "UNKNOWN"

            target_type = str(target_type)[:50] if target_type else "UNKNOWN"
            actor_user_id = str(actor_user_id)[:128] if actor_user_id is not None else None
            result = str(result)[:20] if result else "unknown"

            with self._conn() as conn:
                conn.execute("""
                    INSERT INTO audit_log
                    (ts, actor_user_id, action, target_type, metadata_json, result)
                    VALUES (?, ?, ?, ?, ?, ?)
                """, (ts, actor_user_id, action_val, target_type, meta_str, result))
                conn.commit()
        except Exception as e:
            # Audit failures must not crash the session flow
            log.error(f"Audit log failed for action {action}: {e}", exc_info=True)

