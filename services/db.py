#!/usr/bin/env python3
import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = Path("loot_tables.db")


def connect(db_path: Path | str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Connect to a drop table DB, creating the schema when it is missing.

    ``":memory:"`` is accepted for throwaway databases.
    """
    target = str(db_path) if str(db_path) == ":memory:" else str(Path(db_path))
    conn = sqlite3.connect(target)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys=ON")
    ensure_schema(conn)
    return conn


def ensure_schema(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
    CREATE TABLE IF NOT EXISTS items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        key TEXT NOT NULL UNIQUE,
        display_name TEXT
    )
    """
    )

    # `rows` includes the bottom control bar.
    conn.execute(
        """
    CREATE TABLE IF NOT EXISTS drop_tables (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE,
        rows INTEGER NOT NULL DEFAULT 4 CHECK(rows >= 2),
        allow_decimal_quantities INTEGER NOT NULL DEFAULT 0,
        notes TEXT
    )
    """
    )

    conn.execute(
        """
    CREATE TABLE IF NOT EXISTS drop_entries (
        table_id INTEGER NOT NULL REFERENCES drop_tables(id) ON DELETE CASCADE,
        slot INTEGER NOT NULL CHECK(slot >= 0),
        item_id INTEGER REFERENCES items(id) ON DELETE SET NULL,
        amount INTEGER NOT NULL DEFAULT 1,
        chance REAL NOT NULL CHECK(chance >= 0 AND chance <= 1),
        PRIMARY KEY (table_id, slot)
    )
    """
    )

    conn.execute(
        """
    CREATE TABLE IF NOT EXISTS app_settings (
        key TEXT PRIMARY KEY,
        value TEXT
    )
    """
    )
    conn.commit()


def get_setting(conn: sqlite3.Connection, key: str, default: str | None = None) -> str | None:
    row = conn.execute("SELECT value FROM app_settings WHERE key=?", (key,)).fetchone()
    return row["value"] if row else default


def set_setting(conn: sqlite3.Connection, key: str, value: str) -> None:
    conn.execute(
        "INSERT INTO app_settings(key, value) VALUES(?, ?) "
        "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
        (key, value),
    )
    conn.commit()
