"""
==============================================================================
Database Initialization Module
==============================================================================

Database setup utilities run at application startup and by scripts.

Initialization Flow:
-------------------
1. Build the schema
   - PostgreSQL: apply pending SQL migrations (PostGIS, triggers)
   - SQLite:     create tables from the ORM models
2. Seed demo stores/drinks/inventory into an empty database (optional)
3. Ingest the drinks JSON file if one is configured and present
4. Verify the connection

Usage:
------
    from drinkfinder.db import init_db, DatabaseInitializer

    # Quick initialization
    init_db()

    # Or with more control
    initializer = DatabaseInitializer()
    initializer.create_schema()
    initializer.get_stats()

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from drinkfinder.config import get_settings
from drinkfinder.db.database import DatabaseManager
from drinkfinder.db.migrations import MigrationRunner
from drinkfinder.db.models import EnergyDrink, Store, StoreInventory


# Module logger
logger = logging.getLogger(__name__)


class DatabaseInitializer:
    """
    Database initialization manager.

    Attributes:
        _db_manager: DatabaseManager instance
        _settings: Application settings
    """

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        session: Optional[Session] = None
    ) -> None:
        self._db_manager = db_manager or DatabaseManager()
        self._settings = get_settings()
        self._session = session

    def _get_session(self) -> Session:
        if self._session is not None:
            return self._session
        return self._db_manager.get_session()

    def _release(self, session: Session) -> None:
        if self._session is None:
            session.close()

    # =========================================================================
    # SCHEMA OPERATIONS
    # =========================================================================

    def create_schema(self) -> None:
        """Create or migrate the schema for the configured database."""
        if self._db_manager.dialect_name == "postgresql":
            logger.info("Applying SQL migrations...")
            MigrationRunner(self._db_manager.engine).run()
        else:
            logger.info("Creating database tables...")
            self._db_manager.create_all()

        logger.info("✅ Database schema ready")

    # =========================================================================
    # DATA OPERATIONS
    # =========================================================================

    def seed(self) -> bool:
        """Seed demo data when enabled and the catalog is empty."""
        if not self._settings.seed_sample_data:
            return False

        from drinkfinder.catalog import seed_sample_data

        session = self._get_session()
        try:
            return seed_sample_data(session)
        finally:
            self._release(session)

    def ingest_drinks_file(self) -> None:
        """Merge the configured drinks JSON file into the catalog, if present."""
        path = self._settings.drinks_path
        if not path.exists():
            logger.debug(f"Drinks file not found, skipping ingestion: {path}")
            return

        from drinkfinder.catalog import DrinkIngestor

        session = self._get_session()
        try:
            report = DrinkIngestor(session).ingest_file(path)
            logger.info(f"✅ Drinks file ingested: {report.inserted} new, {report.updated} updated")
        except Exception as e:
            logger.error(f"❌ Failed to ingest drinks file {path}: {e}")
        finally:
            self._release(session)

    # =========================================================================
    # INITIALIZATION METHODS
    # =========================================================================

    def initialize(self) -> None:
        """Full startup initialization."""
        logger.info("=" * 60)
        logger.info("Initializing database...")
        logger.info("=" * 60)

        self.create_schema()
        self.seed()
        self.ingest_drinks_file()

        if self._db_manager.ping():
            logger.info("✅ Database connection verified")
        else:
            logger.warning("⚠️ Database connection check failed")

        logger.info("=" * 60)
        logger.info("Database initialization complete")
        logger.info("=" * 60)

    def get_stats(self) -> dict:
        """Row counts and barcode coverage for the catalog tables."""
        session = self._get_session()

        try:
            with_barcode = session.query(func.count(EnergyDrink.id)).filter(
                EnergyDrink.barcode.isnot(None)
            ).scalar()
            total_drinks = session.query(func.count(EnergyDrink.id)).scalar()

            return {
                "stores": session.query(func.count(Store.id)).scalar(),
                "drinks": {
                    "total": total_drinks,
                    "with_barcode": with_barcode,
                    "without_barcode": total_drinks - with_barcode,
                },
                "inventory": {
                    "total": session.query(func.count(StoreInventory.id)).scalar(),
                    "in_stock": session.query(func.count(StoreInventory.id)).filter(
                        StoreInventory.in_stock.is_(True)
                    ).scalar(),
                },
            }
        finally:
            self._release(session)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def init_db() -> None:
    """Initialize the database (convenience function)."""
    DatabaseInitializer().initialize()
