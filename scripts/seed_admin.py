"""Create the first ADMIN account from ADMIN_IDENTIFIER / ADMIN_PASSWORD.

Usage:
  python scripts/seed_admin.py
  python scripts/seed_admin.py --backfill-supervisors
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.internship_tracker.internship_tracker.database.bootstrap import backfill_supervisor_ids, ensure_admin
from src.internship_tracker.internship_tracker.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the admin account")
    parser.add_argument(
        "--backfill-supervisors",
        action="store_true",
        help="Also link legacy profiles to supervisors by supervisor_name",
    )
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection(DBConfig.from_dict(settings.DB_CONFIG))

    password = getattr(settings, "ADMIN_PASSWORD", "")
    if not password:
        raise SystemExit("ADMIN_PASSWORD is not set")

    identifier = getattr(settings, "ADMIN_IDENTIFIER", "admin")
    created = ensure_admin(conn, identifier=identifier, password=password)
    print(f"OK: admin '{identifier}' {'created' if created else 'already exists'}")

    if args.backfill_supervisors:
        result = backfill_supervisor_ids(conn)
        print(
            f"OK: linked={result['linked']} "
            f"ambiguous={len(result['ambiguous'])} unmatched={len(result['unmatched'])}"
        )


if __name__ == "__main__":
    main()
