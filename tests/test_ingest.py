"""
==============================================================================
Catalog Ingestion and Seeding Tests
==============================================================================
"""

import json

import pytest
from pydantic import ValidationError
from sqlalchemy.orm import Session

from drinkfinder.catalog import DrinkIngestor, DrinkRecord, load_records, seed_sample_data
from drinkfinder.catalog.models import estimate_specs, normalize_barcode
from drinkfinder.catalog.seed import SAMPLE_DRINKS, SAMPLE_INVENTORY, SAMPLE_STORES
from drinkfinder.db.init_db import DatabaseInitializer
from drinkfinder.db.models import EnergyDrink


def write_json(tmp_path, data, name="drinks.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestRecordHelpers:
    """Tests for barcode normalization and size heuristics."""

    def test_leading_zeros_stripped(self):
        assert normalize_barcode(" 070847811169 ") == "70847811169"

    def test_blank_or_zero_barcode(self):
        assert normalize_barcode(None) is None
        assert normalize_barcode("  ") is None
        assert normalize_barcode("0000") is None

    @pytest.mark.parametrize("brand,flavor,expected", [
        ("Red Bull", "Original", (250, 80)),
        ("Celsius", "Sparkling Orange", (355, 200)),
        ("Alani Nu", "Cosmic Stardust", (355, 200)),
        ("Rockstar", "Original 12oz", (355, 300)),
        ("Monster", "Ultra 12-pack", (355, 300)),
        ("Monster", "Original", (473, 300)),
    ])
    def test_estimate_specs(self, brand, flavor, expected):
        assert estimate_specs(brand, flavor) == expected

    def test_blank_brand_rejected(self):
        with pytest.raises(ValidationError):
            DrinkRecord(brand="   ", flavor="Original", upc=None)

    def test_names_stripped(self):
        record = DrinkRecord(brand="  Ghost ", flavor=" Sour Patch ")
        assert (record.brand, record.flavor) == ("Ghost", "Sour Patch")

    def test_numeric_upc_accepted(self):
        record = DrinkRecord.model_validate({"brand": "Bang", "flavor": "Blue Razz", "upc": 610764861136})
        assert record.barcode == "610764861136"
        assert record.description == "Bang Blue Razz energy drink"


class TestLoadRecords:
    """Tests for reading the drinks JSON file."""

    def test_invalid_entries_dropped(self, tmp_path):
        path = write_json(tmp_path, [
            {"brand": "Red Bull", "flavor": "Original", "upc": "611269991000"},
            {"brand": "Monster"},
            {"brand": "   ", "flavor": "Original"},
            {"brand": "Celsius", "flavor": "Kiwi Guava", "upc": None},
        ])
        records = load_records(path)
        assert [r.brand for r in records] == ["Red Bull", "Celsius"]

    def test_not_a_list(self, tmp_path):
        path = write_json(tmp_path, {"brand": "Red Bull"})
        with pytest.raises(ValueError):
            load_records(path)


class TestDrinkIngestor:
    """Tests for merging records into the catalog."""

    def test_insert_with_estimated_specs(self, db: Session):
        report = DrinkIngestor(db).ingest([
            DrinkRecord(brand="Red Bull", flavor="Tropical", upc="0611269357011"),
            DrinkRecord(brand="Ghost", flavor="Lemonade", upc=None),
        ])
        assert report.to_dict() == {
            "total": 2, "inserted": 2, "updated": 0, "skipped": 0, "errors": []
        }

        red_bull = db.query(EnergyDrink).filter(EnergyDrink.brand == "Red Bull").one()
        assert red_bull.barcode == "611269357011"
        assert (red_bull.size_ml, red_bull.caffeine_mg) == (250, 80)

        ghost = db.query(EnergyDrink).filter(EnergyDrink.brand == "Ghost").one()
        assert ghost.barcode is None
        assert ghost.size_ml == 473

    def test_existing_drink_gains_barcode(self, db: Session, drinks):
        report = DrinkIngestor(db).ingest([
            DrinkRecord(brand="Monster", flavor="Ultra White", upc="070847030928"),
        ])
        assert report.updated == 1

        db.refresh(drinks["ultra"])
        assert drinks["ultra"].barcode == "70847030928"

    def test_existing_barcode_skipped(self, db: Session, drinks):
        report = DrinkIngestor(db).ingest([
            DrinkRecord(brand="Red Bull", flavor="Original", upc="611269991000"),
        ])
        assert report.skipped == 1
        assert db.query(EnergyDrink).count() == 3

    def test_duplicates_within_file(self, db: Session):
        records = [
            DrinkRecord(brand="Bang", flavor="Star Blast", upc="610764861600"),
            DrinkRecord(brand="Bang", flavor="Star Blast", upc="610764861600"),
        ]
        report = DrinkIngestor(db).ingest(records)
        assert (report.inserted, report.skipped) == (1, 1)
        assert db.query(EnergyDrink).count() == 1

    def test_ingest_file(self, db: Session, tmp_path):
        path = write_json(tmp_path, [
            {"brand": "Celsius", "flavor": "Sparkling Orange", "upc": "889392000016"},
            {"brand": "Alani Nu", "flavor": "Breezeberry", "upc": "810030510184"},
        ])
        report = DrinkIngestor(db).ingest_file(path)
        assert report.inserted == 2
        assert {d.size_ml for d in db.query(EnergyDrink).all()} == {355}


class TestSeedData:
    """Tests for demo data seeding."""

    def test_seed_empty_database(self, db: Session):
        assert seed_sample_data(db) is True

        stats = DatabaseInitializer(session=db).get_stats()
        assert stats["stores"] == len(SAMPLE_STORES)
        assert stats["drinks"]["total"] == len(SAMPLE_DRINKS)
        assert stats["inventory"]["total"] == len(SAMPLE_INVENTORY)

    def test_seed_skips_populated_database(self, db: Session, drinks):
        assert seed_sample_data(db) is False
        assert db.query(EnergyDrink).count() == 3
