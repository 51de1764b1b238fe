#!/usr/bin/env python3
"""
Apply Database Migrations Script
Runs pending drinkfinder/db/sql/NNN_*.sql files against DATABASE_URL
"""

import argparse
import logging
import sys

from drinkfinder.db.database import DatabaseManager
from drinkfinder.db.migrations import MigrationError, MigrationRunner


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Apply pending SQL migrations")
    parser.add_argument(
        "--list",
        action="store_true",
        help="only list pending migrations"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("DATABASE MIGRATIONS")
    print("=" * 60)

    runner = MigrationRunner(DatabaseManager().engine)

    if args.list:
        pending = runner.pending()
        if not pending:
            print("✅ Database is up to date")
        for name in pending:
            print(f"  • {name}")
        return 0

    try:
        applied = runner.run()
    except MigrationError as e:
        print(f"❌ ERROR: {e}")
        return 1

    if applied:
        for name in applied:
            print(f"✅ Applied {name}")
    else:
        print("✅ Database is up to date")

    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
