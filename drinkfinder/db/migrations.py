"""
==============================================================================
SQL Migration Runner
==============================================================================

Applies the ordered plain-SQL files in `drinkfinder/db/sql/` to a database.

Migration files:
---------------
    db/sql/001_initial_schema.sql
    db/sql/002_add_barcodes.sql
    ...

Files are applied in filename order, each inside its own transaction, and
recorded in the `schema_migrations` table so re-running is a no-op.

The bundled files target PostgreSQL + PostGIS. SQLite databases are built
from the ORM metadata instead (see DatabaseInitializer).

==============================================================================
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional, Set

from sqlalchemy import text
from sqlalchemy.engine import Engine


# Module logger
logger = logging.getLogger(__name__)

SQL_DIR = Path(__file__).resolve().parent / "sql"

MIGRATION_FILE_PATTERN = re.compile(r"^\d{3}_[\w-]+\.sql$")


class MigrationError(Exception):
    """Raised when a migration file fails to apply."""

    def __init__(self, filename: str, cause: Exception):
        self.filename = filename
        self.cause = cause
        super().__init__(f"Migration {filename} failed: {cause}")


class MigrationRunner:
    """
    Imperative runner for numbered SQL migration files.

    Example:
        >>> runner = MigrationRunner(engine)
        >>> runner.pending()
        ['001_initial_schema.sql', '002_add_barcodes.sql']
        >>> runner.run()
    """

    TRACKING_TABLE = "schema_migrations"

    def __init__(self, engine: Engine, migrations_dir: Optional[Path] = None) -> None:
        self._engine = engine
        self._dir = Path(migrations_dir) if migrations_dir else SQL_DIR

    # =========================================================================
    # DISCOVERY
    # =========================================================================

    def discover(self) -> List[Path]:
        """All migration files, sorted by their numeric prefix."""
        if not self._dir.is_dir():
            logger.warning(f"Migrations directory not found: {self._dir}")
            return []

        return sorted(
            path for path in self._dir.iterdir()
            if path.is_file() and MIGRATION_FILE_PATTERN.match(path.name)
        )

    def _ensure_tracking_table(self) -> None:
        with self._engine.begin() as conn:
            conn.execute(text(
                f"CREATE TABLE IF NOT EXISTS {self.TRACKING_TABLE} ("
                "filename VARCHAR(255) PRIMARY KEY, "
                "applied_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP)"
            ))

    def applied(self) -> Set[str]:
        """Filenames already recorded as applied."""
        self._ensure_tracking_table()
        with self._engine.connect() as conn:
            rows = conn.execute(text(f"SELECT filename FROM {self.TRACKING_TABLE}"))
            return {row[0] for row in rows}

    def pending(self) -> List[str]:
        done = self.applied()
        return [path.name for path in self.discover() if path.name not in done]

    # =========================================================================
    # EXECUTION
    # =========================================================================

    def apply(self, path: Path) -> None:
        """
        Apply one migration file and record it.

        Raises:
            MigrationError: The file failed; its transaction is rolled back
        """
        sql = path.read_text(encoding="utf-8")
        logger.info(f"📄 Applying migration: {path.name}")

        try:
            with self._engine.begin() as conn:
                conn.execution_options(no_parameters=True).exec_driver_sql(sql)
                conn.execute(
                    text(f"INSERT INTO {self.TRACKING_TABLE} (filename) VALUES (:filename)"),
                    {"filename": path.name}
                )
        except Exception as e:
            logger.error(f"❌ Migration {path.name} failed: {e}")
            raise MigrationError(path.name, e) from e

        logger.info(f"✅ Applied {path.name}")

    def run(self) -> List[str]:
        """
        Apply all pending migrations in order.

        Returns:
            Filenames applied by this call
        """
        done = self.applied()
        applied_now = []

        for path in self.discover():
            if path.name in done:
                logger.debug(f"Skipping already applied migration: {path.name}")
                continue
            self.apply(path)
            applied_now.append(path.name)

        if applied_now:
            logger.info(f"🚀 Applied {len(applied_now)} migration(s)")
        else:
            logger.info("Database schema is up to date")

        return applied_now
