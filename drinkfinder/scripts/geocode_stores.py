#!/usr/bin/env python3
"""
Geocode Stores Script
Fills in store latitude/longitude from their addresses
"""

import argparse
import logging
import sys

from sqlalchemy import or_

from drinkfinder.clients.geocoding import AddressComponents, GeocodingClient
from drinkfinder.db import DatabaseManager, Store


def stores_to_geocode(session, include_all: bool):
    """Stores missing coordinates (null or 0,0), or every store."""
    query = session.query(Store).order_by(Store.id)
    if not include_all:
        query = query.filter(or_(
            Store.latitude.is_(None),
            Store.longitude.is_(None),
            Store.latitude == 0,
            Store.longitude == 0,
        ))
    return query.all()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Geocode store addresses")
    parser.add_argument("--all", action="store_true", help="re-geocode every store")
    parser.add_argument("--dry-run", action="store_true", help="do not write coordinates")
    parser.add_argument("--delay", type=float, default=None, help="seconds between requests")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("GEOCODE STORES" + (" (DRY RUN)" if args.dry_run else ""))
    print("=" * 60)

    client = GeocodingClient.from_settings()
    if not client.is_configured:
        print("❌ ERROR: GEOCODING_API_KEY is not set")
        return 1

    updated = failed = 0

    try:
        with DatabaseManager().session_scope() as session:
            stores = stores_to_geocode(session, args.all)
            print(f"📍 {len(stores)} store(s) to geocode")

            addresses = [
                AddressComponents(
                    address=store.address,
                    city=store.city,
                    state=store.state,
                    zip_code=store.zip_code,
                )
                for store in stores
            ]
            results = client.batch_geocode(addresses, delay=args.delay)

            for store, result in zip(stores, results):
                if result is None:
                    failed += 1
                    print(f"❌ {store.name}: {store.address}, {store.city}")
                    continue

                print(f"✅ {store.name}: ({result.latitude:.6f}, {result.longitude:.6f})")
                updated += 1
                if not args.dry_run:
                    store.latitude = result.latitude
                    store.longitude = result.longitude
    finally:
        client.close()

    print()
    print(f"📊 Geocoded: {updated}, failed: {failed}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
