"""SQLite connection and schema for the review store."""

import sqlite3
from pathlib import Path

from app.core.logging_config import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS reviews (
    id TEXT PRIMARY KEY,
    repository_path TEXT NOT NULL,
    source_type TEXT NOT NULL,
    base_ref TEXT,
    source_ref TEXT,
    status TEXT NOT NULL DEFAULT 'in_progress',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_reviews_status ON reviews(status);
CREATE INDEX IF NOT EXISTS idx_reviews_created ON reviews(created_at);

CREATE TABLE IF NOT EXISTS comments (
    id TEXT PRIMARY KEY,
    review_id TEXT NOT NULL,
    file_path TEXT NOT NULL,
    line_number INTEGER,
    line_type TEXT,
    content TEXT NOT NULL,
    suggestion TEXT,
    resolved INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    FOREIGN KEY (review_id) REFERENCES reviews(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_comments_review ON comments(review_id);
CREATE INDEX IF NOT EXISTS idx_comments_file ON comments(review_id, file_path);

CREATE TABLE IF NOT EXISTS todos (
    id TEXT PRIMARY KEY,
    content TEXT NOT NULL,
    completed INTEGER NOT NULL DEFAULT 0,
    review_id TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    FOREIGN KEY (review_id) REFERENCES reviews(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_todos_review ON todos(review_id);
CREATE INDEX IF NOT EXISTS idx_todos_completed ON todos(completed);

CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT
);
"""


def open_database(db_path: str, ignore_in_git: bool = False) -> sqlite3.Connection:
    """
    Open (creating if needed) the review database.

    Args:
        db_path: File path, or ``":memory:"`` for a throwaway database
        ignore_in_git: Drop a catch-all ``.gitignore`` beside the database so
            a store kept inside the reviewed repository never shows up as an
            untracked file

    Returns:
        sqlite3.Connection: Connection with row access by column name
    """
    if db_path != ":memory:":
        data_dir = Path(db_path).parent
        data_dir.mkdir(parents=True, exist_ok=True)
        if ignore_in_git:
            gitignore = data_dir / ".gitignore"
            if not gitignore.exists():
                gitignore.write_text("*\n", encoding="utf-8")

    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    # Required for ON DELETE CASCADE on comments
    conn.execute("PRAGMA foreign_keys = ON")
    conn.executescript(SCHEMA_SQL)

    row = conn.execute("SELECT value FROM metadata WHERE key = 'schema_version'").fetchone()
    if row is None:
        conn.execute(
            "INSERT INTO metadata (key, value) VALUES (?, ?)",
            ("schema_version", str(SCHEMA_VERSION)),
        )
        conn.commit()
        logger.debug(f"Initialized review database at {db_path}")
    return conn
