from __future__ import annotations

from pathlib import Path

from brickbook.db.connection import Database

SCHEMA_FILE = Path(__file__).with_name("schema.sql")


def initialize_database(db: Database) -> None:
    """Create database schema if not exists."""
    sql = SCHEMA_FILE.read_text(encoding="utf-8")
    # Execute full SQL script to handle Windows newlines and complex statements
    db.connection.executescript(sql)
