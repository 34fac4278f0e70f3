"""Create a teacher account in the configured MySQL database.

Usage: python scripts/create_teacher.py EMAIL "FULL NAME" PASSWORD
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.container import build_container
from src.attendance_tracker.attendance_tracker.core.exceptions import ValidationError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a teacher account")
    parser.add_argument("email")
    parser.add_argument("full_name")
    parser.add_argument("password")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG), backend="mysql")

    try:
        user = container.user_service.create_teacher(email=args.email, full_name=args.full_name, password=args.password)
    except ValidationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"OK: created {user.email} ({user.full_name})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
