"""
Score and profile storage.

Holds the two records the quiz battle persists: one row per finished
game in ``scores`` and a cumulative XP counter per user in ``profiles``.
Auto-detects the backing database from environment variables:
- DATABASE_URL (PostgreSQL/Supabase) - takes priority
- DATABASE_PATH (SQLite) - fallback for local development

Usage:
    from backend.db_connection import save_score, get_leaderboard, update_user_xp

    save_score("user-1", "ada", 420)
    top = get_leaderboard(limit=10)
    new_total = update_user_xp("user-1", 420)
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import unquote, urlparse

from configs import LEADERBOARD_LIMIT

logger = logging.getLogger("eduvision.db")

# Lazy import psycopg2 (only when PostgreSQL is used)
psycopg2 = None


def _import_psycopg2():
    """Lazy import psycopg2 so SQLite-only deployments never load libpq."""
    global psycopg2
    if psycopg2 is None:
        import psycopg2 as pg
        psycopg2 = pg
    return psycopg2


# =============================================================================
# DATABASE TYPE DETECTION
# =============================================================================

def get_database_url() -> Optional[str]:
    """Get PostgreSQL connection URL if configured."""
    return os.getenv("DATABASE_URL", "").strip() or None


def get_db_type() -> str:
    """
    Detect database type from environment variables.

    Returns:
        'postgresql' if DATABASE_URL is set, 'sqlite' otherwise
    """
    database_url = get_database_url()
    if database_url and database_url.startswith("postgres"):
        return "postgresql"
    return "sqlite"


def get_database_path() -> str:
    """Get SQLite database path."""
    from configs import DATABASE_PATH
    return os.getenv("DATABASE_PATH", DATABASE_PATH)


# =============================================================================
# SCHEMA
# =============================================================================

SQLITE_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS scores (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        username TEXT NOT NULL,
        score INTEGER NOT NULL,
        game_mode TEXT NOT NULL DEFAULT 'quiz',
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS profiles (
        id TEXT PRIMARY KEY,
        username TEXT,
        total_xp INTEGER NOT NULL DEFAULT 0
    )
    """,
)

POSTGRES_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS scores (
        id BIGSERIAL PRIMARY KEY,
        user_id TEXT NOT NULL,
        username TEXT NOT NULL,
        score INTEGER NOT NULL,
        game_mode TEXT NOT NULL DEFAULT 'quiz',
        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS profiles (
        id TEXT PRIMARY KEY,
        username TEXT,
        total_xp INTEGER NOT NULL DEFAULT 0
    )
    """,
)


# =============================================================================
# CONNECTION MANAGEMENT
# =============================================================================

def _get_sqlite_connection() -> sqlite3.Connection:
    """Open the SQLite file, creating it (and its directory) if missing."""
    db_path = Path(get_database_path())
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(db_path)


def _get_postgres_connection():
    """Open a PostgreSQL connection from DATABASE_URL."""
    _import_psycopg2()

    database_url = get_database_url()
    if not database_url:
        raise ValueError("DATABASE_URL environment variable not set")

    parsed = urlparse(database_url)
    logger.info("Connecting to PostgreSQL: user=%s host=%s port=%s", parsed.username, parsed.hostname, parsed.port)

    # Pooler URLs need the original hostname for SNI routing
    if parsed.hostname and "pooler.supabase.com" in parsed.hostname:
        return psycopg2.connect(
            host=parsed.hostname,
            port=parsed.port or 6543,
            user=parsed.username,
            password=unquote(parsed.password) if parsed.password else None,
            dbname=parsed.path.lstrip("/") or "postgres",
            sslmode="require",
        )
    return psycopg2.connect(database_url)


@contextmanager
def get_connection_context():
    """
    Yield a connection that commits on success and is always closed.

    Usage:
        with get_connection_context() as conn:
            conn.cursor().execute("SELECT 1")
    """
    is_postgres = get_db_type() == "postgresql"
    conn = _get_postgres_connection() if is_postgres else _get_sqlite_connection()
    try:
        schema = POSTGRES_SCHEMA if is_postgres else SQLITE_SCHEMA
        cursor = conn.cursor()
        for ddl in schema:
            cursor.execute(ddl)
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _adapt(sql: str) -> str:
    """Queries are written with '?' placeholders; psycopg2 wants '%s'."""
    return sql.replace("?", "%s") if get_db_type() == "postgresql" else sql


def execute_query(sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    """
    Execute SQL and return rows as dictionaries (empty for writes).

    Works with both SQLite and PostgreSQL.
    """
    with get_connection_context() as conn:
        cursor = conn.cursor()
        cursor.execute(_adapt(sql), tuple(params))
        if cursor.description is None:
            return []
        columns = [col[0] for col in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]


# =============================================================================
# SCORES & PROFILES
# =============================================================================

def save_score(user_id: str, username: str, score: int, game_mode: str = "quiz") -> None:
    """Record a finished game."""
    execute_query(
        "INSERT INTO scores (user_id, username, score, game_mode, created_at) VALUES (?, ?, ?, ?, ?)",
        (user_id, username, int(score), game_mode, datetime.now(timezone.utc).isoformat()),
    )
    logger.info("Saved %s score %d for %s", game_mode, score, username)


def get_leaderboard(limit: int = LEADERBOARD_LIMIT) -> List[Dict[str, Any]]:
    """Top scores, highest first."""
    rows = execute_query(
        "SELECT username, score, game_mode, created_at FROM scores ORDER BY score DESC, id ASC LIMIT ?",
        (int(limit),),
    )
    for row in rows:
        if not isinstance(row["created_at"], str):
            row["created_at"] = row["created_at"].isoformat()
    return rows


def get_user_xp(user_id: str) -> int:
    rows = execute_query("SELECT total_xp FROM profiles WHERE id = ?", (user_id,))
    return int(rows[0]["total_xp"]) if rows else 0


def update_user_xp(user_id: str, xp_to_add: int, username: Optional[str] = None) -> int:
    """
    Add XP to a profile and return the new total.

    A user without a profile row starts from zero and gets one created.
    """
    with get_connection_context() as conn:
        cursor = conn.cursor()
        cursor.execute(_adapt("SELECT total_xp FROM profiles WHERE id = ?"), (user_id,))
        row = cursor.fetchone()
        new_total = (int(row[0]) if row else 0) + int(xp_to_add)

        if row:
            cursor.execute(_adapt("UPDATE profiles SET total_xp = ? WHERE id = ?"), (new_total, user_id))
        else:
            cursor.execute(
                _adapt("INSERT INTO profiles (id, username, total_xp) VALUES (?, ?, ?)"),
                (user_id, username, new_total),
            )
    return new_total


# =============================================================================
# CONNECTION TESTING
# =============================================================================

def test_connection() -> Dict[str, Any]:
    """
    Test database connection and return status.

    Returns:
        Dictionary with connection status and info
    """
    db_type = get_db_type()
    try:
        if db_type == "postgresql":
            connection_info = (get_database_url() or "")[:20] + "..."
        else:
            connection_info = get_database_path()

        rows = execute_query("SELECT COUNT(*) AS score_count FROM scores")
        return {
            "connected": True,
            "db_type": db_type,
            "connection_info": connection_info,
            "score_count": int(rows[0]["score_count"]) if rows else 0,
        }
    except Exception as e:
        logger.warning("Database connection test failed: %s", e)
        return {
            "connected": False,
            "db_type": db_type,
            "error": str(e),
        }
