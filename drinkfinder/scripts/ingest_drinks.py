#!/usr/bin/env python3
"""
Ingest Energy Drinks Script
Merges a JSON list of {brand, flavor, upc} records into the catalog
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from drinkfinder.catalog import DrinkIngestor
from drinkfinder.config import get_settings
from drinkfinder.db import DatabaseInitializer, DatabaseManager


def main(argv=None) -> int:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Ingest energy drinks from a JSON file")
    parser.add_argument(
        "file",
        nargs="?",
        type=Path,
        default=settings.drinks_path,
        help=f"drinks JSON file (default: {settings.drinks_file})"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("INGEST ENERGY DRINKS")
    print("=" * 60)

    if not args.file.exists():
        print(f"❌ ERROR: File not found: {args.file}")
        return 1

    db_manager = DatabaseManager()
    DatabaseInitializer(db_manager).create_schema()

    try:
        with db_manager.session_scope() as session:
            report = DrinkIngestor(session).ingest_file(args.file)
    except (ValueError, json.JSONDecodeError) as e:
        print(f"❌ ERROR: {e}")
        return 1

    print()
    print(f"📊 Total records: {report.total}")
    print(f"✅ Inserted:      {report.inserted}")
    print(f"✏️ Updated:       {report.updated}")
    print(f"⏭️ Skipped:       {report.skipped}")
    if report.errors:
        print(f"❌ Errors:        {len(report.errors)}")
        for error in report.errors:
            print(f"   {error}")
    print("=" * 60)

    return 1 if report.errors else 0


if __name__ == "__main__":
    sys.exit(main())
