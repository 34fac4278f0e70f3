"""Create the attendance tracker tables in the configured MySQL database.

Usage: python scripts/init_db.py [--schema PATH]
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

import mysql.connector

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.database.bootstrap import apply_schema, list_tables

EXPECTED_TABLES = ("users", "classrooms", "students", "attendance")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Apply database/schema.sql")
    parser.add_argument("--schema", type=Path, default=REPO_ROOT / "database" / "schema.sql")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    try:
        apply_schema(db_config, schema_path=args.schema)
        tables = set(list_tables(db_config))
    except mysql.connector.Error as e:
        print(f"ERROR: {target}: {e}", file=sys.stderr)
        return 1

    for name in EXPECTED_TABLES:
        print(f"  {'ok     ' if name in tables else 'MISSING'} {name}")
    missing = [name for name in EXPECTED_TABLES if name not in tables]
    if missing:
        print(f"ERROR: {args.schema.name} did not create: {', '.join(missing)}", file=sys.stderr)
        return 1

    print(f"OK: applied {args.schema.name} -> {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
