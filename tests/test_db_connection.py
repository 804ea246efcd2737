"""
Score and profile storage tests against a temporary SQLite file.
"""

from backend import db_connection


class TestDbType:

    def test_sqlite_without_url(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        assert db_connection.get_db_type() == "sqlite"

    def test_postgres_url(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@localhost:5432/db")
        assert db_connection.get_db_type() == "postgresql"
        assert db_connection._adapt("SELECT ? , ?") == "SELECT %s , %s"


class TestScores:

    def test_leaderboard_orders_by_score(self, sqlite_db):
        db_connection.save_score("u1", "ada", 300)
        db_connection.save_score("u2", "bob", 500)
        db_connection.save_score("u3", "cy", 300)

        board = db_connection.get_leaderboard()
        assert [(r["username"], r["score"]) for r in board] == [("bob", 500), ("ada", 300), ("cy", 300)]
        assert board[0]["game_mode"] == "quiz"
        assert isinstance(board[0]["created_at"], str)

    def test_leaderboard_limit(self, sqlite_db):
        for i in range(5):
            db_connection.save_score(f"u{i}", f"user{i}", i * 10)
        assert len(db_connection.get_leaderboard(limit=2)) == 2

    def test_empty_leaderboard(self, sqlite_db):
        assert db_connection.get_leaderboard() == []
        assert sqlite_db.exists()


class TestProfiles:

    def test_xp_accumulates(self, sqlite_db):
        assert db_connection.get_user_xp("u1") == 0
        assert db_connection.update_user_xp("u1", 100, "ada") == 100
        assert db_connection.update_user_xp("u1", 50) == 150
        assert db_connection.get_user_xp("u1") == 150

    def test_profiles_are_per_user(self, sqlite_db):
        db_connection.update_user_xp("u1", 100)
        db_connection.update_user_xp("u2", 7)
        assert db_connection.get_user_xp("u1") == 100
        assert db_connection.get_user_xp("u2") == 7


class TestConnectionStatus:

    def test_reports_connected(self, sqlite_db):
        db_connection.save_score("u1", "ada", 10)
        info = db_connection.test_connection()
        assert info["connected"] is True
        assert info["db_type"] == "sqlite"
        assert info["score_count"] == 1

    def test_reports_failure(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        monkeypatch.setenv("DATABASE_PATH", str(blocker / "scores.db"))

        info = db_connection.test_connection()
        assert info["connected"] is False
        assert "error" in info
