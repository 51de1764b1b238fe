#!/usr/bin/env python3
"""
Verify Energy Drinks Script
Prints catalog counts per brand and barcode coverage
"""

import argparse
import sys

from drinkfinder.db import DatabaseManager
from drinkfinder.services.drink_service import DrinkService


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Summarize the energy drink catalog")
    parser.parse_args(argv)

    print("=" * 60)
    print("ENERGY DRINK CATALOG")
    print("=" * 60)

    with DatabaseManager().session_scope() as session:
        stats = DrinkService(session).get_stats()

    print(f"📊 Total drinks: {stats['total']}")
    print()
    for entry in stats["brands"]:
        print(f"  {entry['brand']:<30} {entry['count']:>5}")
    print()
    print(f"✅ With barcode:    {stats['barcodes']['with_barcode']}")
    print(f"⚠️ Without barcode: {stats['barcodes']['without_barcode']}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
