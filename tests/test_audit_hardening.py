import json
import sqlite3
from unittest.mock import patch

from infrastructure.repositories.sqlite_audit_repository import AuditAction, SQLiteAuditRepository
from use_cases.auth_state import AuthStateResolver, SignInSucceeded
from use_cases.session_store import SessionStore


def make_repo(tmp_path):
    repo = SQLiteAuditRepository(str(tmp_path / "audit.db"))
    repo.init_db()
    return repo


def read_rows(repo):
    with sqlite3.connect(repo.db_path) as conn:
        return conn.execute(
            "SELECT actor_user_id, action, target_type, metadata_json, result FROM audit_log ORDER BY id"
        ).fetchall()


def test_log_action_filters_metadata(tmp_path):
    repo = make_repo(tmp_path)

    repo.log_action(
        AuditAction.SIGN_IN_FAIL,
        target_type="session",
        metadata={"reason": "INVALID_LOGIN_CREDENTIALS", "password": "hunter2", "attempt": 2, "note": "token=abc"},
        result="fail",
    )

    rows = read_rows(repo)
    assert len(rows) == 1
    actor, action, target_type, meta_json, result = rows[0]
    assert actor is None
    assert action == "SIGN_IN_FAIL"
    assert target_type == "session"
    assert result == "fail"
    assert json.loads(meta_json) == {"reason": "INVALID_LOGIN_CREDENTIALS", "attempt": 2}


def test_resolver_transitions_are_persisted(tmp_path):
    repo = make_repo(tmp_path)
    resolver = AuthStateResolver(SessionStore(), audit=repo)

    attempt = resolver.begin_sign_in()
    resolver.handle(SignInSucceeded(attempt, "u1", False))

    rows = read_rows(repo)
    assert [r[1] for r in rows] == ["SIGN_IN_STARTED", "SIGN_IN_SUCCESS"]
    assert rows[1][0] == "u1"
    assert json.loads(rows[1][3]) == {"attempt": 1, "status": "incomplete_profile"}


def test_audit_failure_does_not_break_session_flow(tmp_path):
    repo = make_repo(tmp_path)
    store = SessionStore()
    resolver = AuthStateResolver(store, audit=repo)

    with patch.object(repo, "_conn", side_effect=RuntimeError("Database is completely down")):
        attempt = resolver.begin_sign_in()
        outcome = resolver.handle(SignInSucceeded(attempt, "u1", True))

    assert outcome.applied is True
    assert store.current().state == "complete"


def test_log_action_tolerates_missing_database_directory(tmp_path):
    repo = SQLiteAuditRepository(str(tmp_path / "missing" / "audit.db"))
    repo.log_action(AuditAction.SIGN_OUT, target_type="session", actor_user_id="u1")
    assert not (tmp_path / "missing").exists()
