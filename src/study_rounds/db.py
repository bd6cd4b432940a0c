"""Database initialization and connection management."""
import sqlite3
from pathlib import Path

from study_rounds.config import DEFAULT_DB_PATH

SCHEMA = """
CREATE TABLE IF NOT EXISTS study_plans (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    title TEXT NOT NULL,
    total_units INTEGER NOT NULL,
    unit TEXT NOT NULL DEFAULT 'problem',
    range_start INTEGER,
    range_end INTEGER,
    created_at TEXT NOT NULL,
    deadline TEXT NOT NULL,
    rounds INTEGER NOT NULL DEFAULT 1,
    target_rounds INTEGER NOT NULL DEFAULT 1,
    estimated_time_per_unit REAL NOT NULL,
    difficulty TEXT NOT NULL DEFAULT 'normal',
    study_days TEXT NOT NULL DEFAULT '[1, 2, 3, 4, 5]',  -- JSON
    status TEXT NOT NULL DEFAULT 'active',
    daily_quota REAL,
    dynamic_deadline TEXT,
    completed_today_on TEXT,
    version INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS study_sessions (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    plan_id TEXT NOT NULL REFERENCES study_plans(id) ON DELETE CASCADE,
    date TEXT NOT NULL,
    units_completed INTEGER NOT NULL,
    duration_minutes REAL NOT NULL,
    concentration REAL NOT NULL,
    difficulty INTEGER NOT NULL,
    round INTEGER NOT NULL DEFAULT 1,
    start_unit INTEGER,
    end_unit INTEGER
);

CREATE INDEX IF NOT EXISTS idx_sessions_plan ON study_sessions(plan_id, date);
CREATE INDEX IF NOT EXISTS idx_sessions_user ON study_sessions(user_id, date);

CREATE TABLE IF NOT EXISTS review_items (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    plan_id TEXT NOT NULL REFERENCES study_plans(id) ON DELETE CASCADE,
    unit_number INTEGER NOT NULL,
    last_review_date TEXT NOT NULL,
    next_review_date TEXT NOT NULL,
    ease_factor REAL NOT NULL DEFAULT 2.5,
    repetitions INTEGER NOT NULL DEFAULT 0,
    interval_days INTEGER NOT NULL DEFAULT 1
);

CREATE INDEX IF NOT EXISTS idx_review_items_due ON review_items(user_id, next_review_date);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()
