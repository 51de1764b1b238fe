"""
==============================================================================
Catalog Package - Drink Ingestion & Sample Data
==============================================================================

Classes:
--------
- DrinkRecord: Pydantic model for one entry of an ingestion file
- DrinkIngestor: Merges records into the energy_drinks table
- IngestReport: Inserted/updated/skipped counters

Functions:
----------
- load_records: Read a JSON list of {brand, flavor, upc}
- seed_sample_data: Populate an empty database with demo data

==============================================================================
"""

from .models import DrinkRecord, estimate_specs, normalize_barcode
from .ingest import DrinkIngestor, IngestReport, load_records
from .seed import seed_sample_data

__all__ = [
    "DrinkRecord",
    "estimate_specs",
    "normalize_barcode",
    "DrinkIngestor",
    "IngestReport",
    "load_records",
    "seed_sample_data",
]
