#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sqlite3
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from services.db import connect
from services.drop_tables import fetch_drop_entries, find_drop_table


def build_export(conn: sqlite3.Connection, table_name: str, *, include_empty: bool = False) -> dict:
    table = find_drop_table(conn, table_name)
    if table is None:
        raise ValueError(f"Unknown drop table '{table_name}'.")
    entries = []
    for slot, row in fetch_drop_entries(conn, int(table["id"])).items():
        if row["item_key"] is None and not include_empty:
            continue
        entries.append(
            {
                "slot": slot,
                "item_key": row["item_key"],
                "amount": int(row["amount"] or 1),
                "chance": round(float(row["chance"]), 6),
            }
        )
    return {"name": table["name"], "rows": int(table["rows"]), "entries": entries}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export a drop table as JSON.")
    parser.add_argument("--db", default="loot_tables.db", help="Path to drop table DB (default: loot_tables.db)")
    parser.add_argument("--table", required=True, help="Name of the drop table to export")
    parser.add_argument("--out", default=None, help="Output JSON path (default: stdout)")
    parser.add_argument("--include-empty", action="store_true", help="Include slots without an item")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    conn = connect(Path(args.db))
    try:
        data = build_export(conn, args.table, include_empty=bool(args.include_empty))
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    finally:
        conn.close()

    text = json.dumps(data, indent=2)
    if args.out:
        Path(args.out).write_text(text)
        print(f"Wrote drop table: {args.out}")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
