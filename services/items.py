from __future__ import annotations

import sqlite3
from dataclasses import dataclass


@dataclass(frozen=True)
class DropItem:
    key: str
    name: str
    amount: int = 1

    def label(self) -> str:
        if self.amount > 1:
            return f"{self.amount}x {self.name}"
        return self.name


def item_from_row(row: sqlite3.Row, amount: int = 1) -> DropItem:
    return DropItem(key=row["key"], name=row["name"], amount=max(1, int(amount or 1)))


def fetch_items(conn: sqlite3.Connection) -> list[sqlite3.Row]:
    return conn.execute(
        """
        SELECT id, key, COALESCE(display_name, key) AS name
        FROM items
        ORDER BY name COLLATE NOCASE
        """
    ).fetchall()


def get_item_by_key(conn: sqlite3.Connection, key: str) -> sqlite3.Row | None:
    return conn.execute(
        "SELECT id, key, COALESCE(display_name, key) AS name FROM items WHERE key=?",
        (key,),
    ).fetchone()


def add_item(conn: sqlite3.Connection, key: str, display_name: str | None = None) -> int:
    cur = conn.execute(
        "INSERT INTO items(key, display_name) VALUES(?, ?)",
        (key.strip(), (display_name or "").strip() or None),
    )
    conn.commit()
    return int(cur.lastrowid)


def ensure_item(conn: sqlite3.Connection, item: DropItem) -> int:
    row = get_item_by_key(conn, item.key)
    if row is not None:
        return int(row["id"])
    cur = conn.execute(
        "INSERT INTO items(key, display_name) VALUES(?, ?)",
        (item.key, item.name or None),
    )
    return int(cur.lastrowid)
