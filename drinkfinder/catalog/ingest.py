"""
==============================================================================
Catalog Ingestion Module
==============================================================================

Loads drink records from JSON and merges them into the energy_drinks table.

Merge rules (per record):
------------------------
1. Look up an existing drink by normalized barcode, then by
   (brand, flavor, estimated size).
2. Existing drink without a barcode + record with one → set the barcode
   (counted as "updated").
3. Existing drink otherwise → "skipped".
4. No existing drink → insert with estimated size/caffeine ("inserted").

Each record runs inside its own SAVEPOINT, so a constraint violation on one
record is counted as skipped and never aborts the batch.

==============================================================================
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from drinkfinder.catalog.models import DrinkRecord
from drinkfinder.db.models import EnergyDrink


# Module logger
logger = logging.getLogger(__name__)


@dataclass
class IngestReport:
    """Counters for one ingestion run."""

    total: int = 0
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "inserted": self.inserted,
            "updated": self.updated,
            "skipped": self.skipped,
            "errors": list(self.errors),
        }


def load_records(path: Path) -> List[DrinkRecord]:
    """
    Read and validate drink records from a JSON file.

    Invalid entries are logged and dropped.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a JSON list
    """
    with Path(path).open("r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON list of drinks in {path}")

    records = []
    for index, item in enumerate(data):
        try:
            records.append(DrinkRecord.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping invalid drink entry #{index}: {e.errors()[0]['msg']}")

    logger.info(f"📂 Loaded {len(records)} drink records from {path}")
    return records


class DrinkIngestor:
    """
    Merges DrinkRecords into the catalog.

    Example:
        >>> ingestor = DrinkIngestor(session)
        >>> report = ingestor.ingest(load_records(Path("data/drinks.json")))
        >>> report.inserted
        42
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def _find_existing(self, record: DrinkRecord, size_ml: int) -> Optional[EnergyDrink]:
        barcode = record.barcode
        if barcode:
            existing = self._db.query(EnergyDrink).filter(
                EnergyDrink.barcode == barcode
            ).first()
            if existing:
                return existing

        return self._db.query(EnergyDrink).filter(
            EnergyDrink.brand == record.brand,
            EnergyDrink.flavor == record.flavor,
            EnergyDrink.size_ml == size_ml
        ).first()

    def ingest_one(self, record: DrinkRecord) -> str:
        """
        Merge a single record.

        Returns:
            "inserted", "updated" or "skipped"
        """
        size_ml, caffeine_mg = record.specs
        barcode = record.barcode

        existing = self._find_existing(record, size_ml)

        if existing is not None:
            if not existing.barcode and barcode:
                existing.barcode = barcode
                self._db.flush()
                logger.info(f"✏️ Updated: {record.brand} {record.flavor} - added barcode {barcode}")
                return "updated"

            logger.debug(f"Skipped: {record.brand} {record.flavor} - already exists")
            return "skipped"

        drink = EnergyDrink(
            brand=record.brand,
            flavor=record.flavor,
            size_ml=size_ml,
            caffeine_mg=caffeine_mg,
            barcode=barcode,
            description=record.description,
        )
        self._db.add(drink)
        self._db.flush()

        logger.info(
            f"✅ Inserted: {record.brand} {record.flavor} "
            f"({size_ml}ml, {caffeine_mg}mg caffeine, barcode: {barcode or 'N/A'})"
        )
        return "inserted"

    def ingest(self, records: Iterable[DrinkRecord]) -> IngestReport:
        """Merge all records and commit."""
        report = IngestReport()

        for record in records:
            report.total += 1
            savepoint = self._db.begin_nested()
            try:
                outcome = self.ingest_one(record)
                savepoint.commit()
            except IntegrityError:
                savepoint.rollback()
                logger.info(f"⏭️ Skipped: {record.brand} {record.flavor} - duplicate")
                outcome = "skipped"
            except Exception as e:
                savepoint.rollback()
                logger.error(f"❌ Error ingesting {record.brand} {record.flavor}: {e}")
                report.errors.append(f"{record.brand} {record.flavor}: {e}")
                continue

            setattr(report, outcome, getattr(report, outcome) + 1)

        self._db.commit()

        logger.info(
            f"📈 Ingest summary: inserted={report.inserted} "
            f"updated={report.updated} skipped={report.skipped} "
            f"errors={len(report.errors)}"
        )
        return report

    def ingest_file(self, path: Path) -> IngestReport:
        return self.ingest(load_records(path))
