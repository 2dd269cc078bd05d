from __future__ import annotations

import logging
import sqlite3
from typing import Any, Callable, Iterable

from services.drop_source import DropSource, SlotResult
from services.grid_layout import GridLayout
from services.items import DropItem, ensure_item

_LOGGER = logging.getLogger(__name__)

DEFAULT_CHANCE = 1.0


def list_drop_tables(conn: sqlite3.Connection) -> list[dict[str, Any]]:
    rows = conn.execute(
        """
        SELECT id, name, rows, allow_decimal_quantities, COALESCE(notes, '') AS notes
        FROM drop_tables
        ORDER BY name COLLATE NOCASE, id
        """
    ).fetchall()
    return [dict(row) for row in rows]


def get_drop_table(conn: sqlite3.Connection, table_id: int) -> sqlite3.Row | None:
    return conn.execute(
        "SELECT id, name, rows, allow_decimal_quantities, notes FROM drop_tables WHERE id=?",
        (table_id,),
    ).fetchone()


def find_drop_table(conn: sqlite3.Connection, name: str) -> sqlite3.Row | None:
    return conn.execute(
        "SELECT id, name, rows, allow_decimal_quantities, notes FROM drop_tables WHERE name=?",
        (name,),
    ).fetchone()


def create_drop_table(
    conn: sqlite3.Connection,
    *,
    name: str,
    rows: int = 4,
    allow_decimal_quantities: bool = False,
    notes: str | None = None,
) -> int:
    name = (name or "").strip()
    if not name:
        raise ValueError("Drop table name cannot be empty.")
    GridLayout(rows=int(rows))
    cur = conn.execute(
        "INSERT INTO drop_tables(name, rows, allow_decimal_quantities, notes) VALUES(?, ?, ?, ?)",
        (name, int(rows), 1 if allow_decimal_quantities else 0, notes),
    )
    conn.commit()
    return int(cur.lastrowid)


def delete_drop_table(conn: sqlite3.Connection, table_id: int) -> None:
    conn.execute("DELETE FROM drop_tables WHERE id=?", (table_id,))
    conn.commit()


def fetch_drop_entries(conn: sqlite3.Connection, table_id: int) -> dict[int, sqlite3.Row]:
    rows = conn.execute(
        """
        SELECT
            e.slot,
            e.item_id,
            e.amount,
            e.chance,
            i.key AS item_key,
            COALESCE(i.display_name, i.key) AS item_name
        FROM drop_entries e
        LEFT JOIN items i ON i.id = e.item_id
        WHERE e.table_id=?
        ORDER BY e.slot
        """,
        (table_id,),
    ).fetchall()
    return {int(row["slot"]): row for row in rows}


def replace_drop_entries(conn: sqlite3.Connection, table_id: int, results: Iterable[SlotResult]) -> int:
    """Overwrite the stored entries of a table with committed slot results.

    Slots without an item keep their chance so it survives an item being taken
    out and put back.
    """
    results = list(results)
    with conn:
        conn.execute("DELETE FROM drop_entries WHERE table_id=?", (table_id,))
        for result in results:
            item = result.item
            if item is not None and not isinstance(item, DropItem):
                raise ValueError(f"Slot {result.slot} holds an unsupported item: {item!r}")
            item_id = ensure_item(conn, item) if item is not None else None
            conn.execute(
                """
                INSERT INTO drop_entries(table_id, slot, item_id, amount, chance)
                VALUES(?, ?, ?, ?, ?)
                """,
                (
                    table_id,
                    int(result.slot),
                    item_id,
                    item.amount if item is not None else 1,
                    float(result.weight),
                ),
            )
    return len(results)


def drop_source_for_table(
    conn: sqlite3.Connection,
    table_id: int,
    *,
    can_edit: Callable[[int], bool] | None = None,
    on_commit: Callable[[list[SlotResult]], None] | None = None,
) -> DropSource:
    table = get_drop_table(conn, table_id)
    if table is None:
        raise ValueError(f"Unknown drop table id {table_id}.")
    layout = GridLayout(rows=int(table["rows"]))
    entries = fetch_drop_entries(conn, table_id)

    def baseline_weight(slot: int) -> float | None:
        row = entries.get(slot)
        if row is None:
            return DEFAULT_CHANCE
        return float(row["chance"])

    def item_at(slot: int) -> DropItem | None:
        row = entries.get(slot)
        if row is None or row["item_key"] is None:
            return None
        return DropItem(key=row["item_key"], name=row["item_name"], amount=int(row["amount"] or 1))

    def commit(results: list[SlotResult]) -> None:
        written = replace_drop_entries(conn, table_id, results)
        entries.clear()
        entries.update(fetch_drop_entries(conn, table_id))
        _LOGGER.info("Saved %d drop entries for table %s", written, table["name"])
        if on_commit is not None:
            on_commit(results)

    return DropSource(
        baseline_weight=baseline_weight,
        item_at=item_at,
        commit=commit,
        can_edit=can_edit or (lambda slot: 0 <= slot < layout.bottom_row_start),
        allow_fractional_quantities=bool(table["allow_decimal_quantities"]),
    )
