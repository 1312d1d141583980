import sqlite3

from infrastructure.repositories.sqlite_profile_repository import SQLiteProfileRepository


def make_repo(tmp_path):
    repo = SQLiteProfileRepository(str(tmp_path / "profiles.db"))
    repo.init_db()
    return repo


def test_init_db_is_idempotent(tmp_path):
    repo = make_repo(tmp_path)
    repo.init_db()

    with sqlite3.connect(repo.db_path) as conn:
        versions = conn.execute("SELECT version FROM schema_info").fetchall()
    assert versions == [(1,)]


def test_unknown_user_has_no_profile(tmp_path):
    repo = make_repo(tmp_path)
    assert repo.get_profile("nobody") is None
    assert repo.is_profile_complete("nobody") is False


def test_save_profile_marks_complete(tmp_path):
    repo = make_repo(tmp_path)

    assert repo.save_profile("u1", "Asha", "+91 98765 43210", "Pune") is True

    profile = repo.get_profile("u1")
    assert profile["display_name"] == "Asha"
    assert profile["city"] == "Pune"
    assert repo.is_profile_complete("u1") is True


def test_resave_keeps_first_completion_time(tmp_path):
    repo = make_repo(tmp_path)
    repo.save_profile("u1", "Asha", "1", "Pune")
    first_completed = repo.get_profile("u1")["completed_at"]

    repo.save_profile("u1", "Asha K", "2", "Mumbai")

    profile = repo.get_profile("u1")
    assert profile["display_name"] == "Asha K"
    assert profile["city"] == "Mumbai"
    assert profile["completed_at"] == first_completed
