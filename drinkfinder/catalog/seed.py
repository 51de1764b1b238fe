"""
==============================================================================
Sample Data Module
==============================================================================

Demo stores, drinks and inventory for development databases.

Four Manhattan convenience stores and ten popular drinks (with barcodes),
linked by a small inventory table so search and scan work out of the box.
Seeding only runs against an empty catalog.

==============================================================================
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from drinkfinder.db.models import EnergyDrink, Store, StoreInventory


# Module logger
logger = logging.getLogger(__name__)


SAMPLE_STORES = [
    {"name": "7-Eleven Downtown", "address": "123 Main St", "city": "New York", "state": "NY",
     "zip_code": "10001", "latitude": 40.750580, "longitude": -73.993584, "phone": "212-555-0100"},
    {"name": "QuikTrip Midtown", "address": "456 5th Ave", "city": "New York", "state": "NY",
     "zip_code": "10018", "latitude": 40.754932, "longitude": -73.984016, "phone": "212-555-0101"},
    {"name": "Wawa Plaza", "address": "789 Broadway", "city": "New York", "state": "NY",
     "zip_code": "10003", "latitude": 40.732000, "longitude": -73.990000, "phone": "212-555-0102"},
    {"name": "Circle K East", "address": "321 Park Ave", "city": "New York", "state": "NY",
     "zip_code": "10022", "latitude": 40.758896, "longitude": -73.968285, "phone": "212-555-0103"},
]

SAMPLE_DRINKS = [
    {"brand": "Red Bull", "flavor": "Original", "size_ml": 250, "caffeine_mg": 80, "sugar_g": 27,
     "calories": 110, "barcode": "611269991000", "description": "Classic Red Bull energy drink"},
    {"brand": "Red Bull", "flavor": "Sugar Free", "size_ml": 250, "caffeine_mg": 80, "sugar_g": 0,
     "calories": 10, "barcode": "611269991017", "description": "Red Bull with zero sugar"},
    {"brand": "Monster", "flavor": "Original", "size_ml": 473, "caffeine_mg": 160, "sugar_g": 54,
     "calories": 210, "barcode": "070847811169", "description": "Monster Energy original green"},
    {"brand": "Monster", "flavor": "Ultra White", "size_ml": 473, "caffeine_mg": 150, "sugar_g": 0,
     "calories": 10, "barcode": "070847030928", "description": "Monster Ultra zero sugar white"},
    {"brand": "Bang", "flavor": "Cotton Candy", "size_ml": 473, "caffeine_mg": 300, "sugar_g": 0,
     "calories": 0, "barcode": "819005020306", "description": "Bang Energy cotton candy flavor"},
    {"brand": "Bang", "flavor": "Blue Razz", "size_ml": 473, "caffeine_mg": 300, "sugar_g": 0,
     "calories": 0, "barcode": "819005020207", "description": "Bang Energy blue raspberry"},
    {"brand": "Celsius", "flavor": "Sparkling Orange", "size_ml": 355, "caffeine_mg": 200, "sugar_g": 0,
     "calories": 10, "barcode": "889392002027", "description": "Celsius fitness drink orange"},
    {"brand": "Reign", "flavor": "Melon Mania", "size_ml": 473, "caffeine_mg": 300, "sugar_g": 0,
     "calories": 10, "barcode": "084879518801", "description": "Reign Total Body Fuel melon"},
    {"brand": "Rockstar", "flavor": "Original", "size_ml": 473, "caffeine_mg": 160, "sugar_g": 62,
     "calories": 250, "barcode": "818094002875", "description": "Rockstar original energy"},
    {"brand": "5-hour Energy", "flavor": "Berry", "size_ml": 59, "caffeine_mg": 200, "sugar_g": 0,
     "calories": 4, "barcode": "719410100018", "description": "Extra strength 5-hour shot"},
]

# (store index, drink index, price, in_stock)
SAMPLE_INVENTORY = [
    (0, 0, 2.99, True), (0, 1, 2.99, True), (0, 2, 3.49, True),
    (0, 4, 3.99, True), (0, 6, 3.29, True), (0, 9, 4.49, False),
    (1, 2, 3.29, True), (1, 3, 3.29, True), (1, 4, 3.79, True),
    (1, 5, 3.79, True), (1, 8, 3.49, True),
    (2, 0, 3.19, True), (2, 1, 3.19, True), (2, 6, 3.49, True), (2, 7, 3.99, True),
    (3, 0, 2.89, True), (3, 2, 3.19, True), (3, 3, 3.19, True), (3, 4, 3.69, True),
    (3, 6, 3.39, True), (3, 7, 3.89, True), (3, 8, 3.29, True), (3, 9, 4.29, True),
]


def seed_sample_data(db: Session) -> bool:
    """
    Insert the demo data set into an empty database.

    Returns:
        True if data was inserted, False if stores or drinks already exist
    """
    if db.query(Store).first() is not None or db.query(EnergyDrink).first() is not None:
        logger.info("Catalog already populated, skipping sample data")
        return False

    stores = [Store(**data) for data in SAMPLE_STORES]
    drinks = [EnergyDrink(**data) for data in SAMPLE_DRINKS]
    db.add_all(stores + drinks)
    db.flush()

    db.add_all([
        StoreInventory(
            store_id=stores[store_idx].id,
            drink_id=drinks[drink_idx].id,
            price=price,
            in_stock=in_stock,
        )
        for store_idx, drink_idx, price, in_stock in SAMPLE_INVENTORY
    ])

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"🌱 Seeded {len(stores)} stores, {len(drinks)} drinks, "
        f"{len(SAMPLE_INVENTORY)} inventory rows"
    )
    return True
