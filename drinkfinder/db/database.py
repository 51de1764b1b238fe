"""
==============================================================================
Database Engine and Sessions
==============================================================================

One engine per process, shared by the API, the WebSocket scanner and the
maintenance scripts.

Supported backends:
------------------
    postgresql://...   PostGIS; pooled connections with pre-ping, schema
                       from db/sql migrations
    sqlite:///...      development and tests; schema from ORM metadata

SQLite connections are prepared on connect:
    PRAGMA foreign_keys=ON                    inventory rows cascade
    great_circle_km(lat1, lon1, lat2, lon2)   distance in km for spatial.py

==============================================================================
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from drinkfinder.config import get_settings


# Module logger
logger = logging.getLogger(__name__)

Base = declarative_base()

# Mean Earth radius, matches PostGIS spherical distances
EARTH_RADIUS_KM = 6371.0088

POSTGRES_POOL_OPTIONS = {
    "pool_size": 5,
    "max_overflow": 10,
    "pool_timeout": 30,
    "pool_recycle": 1800,
    "pool_pre_ping": True,
}


def great_circle_km(lat1, lon1, lat2, lon2) -> Optional[float]:
    """Haversine distance in kilometres; NULL in, NULL out."""
    if None in (lat1, lon1, lat2, lon2):
        return None

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))


def configure_sqlite_engine(engine: Engine) -> None:
    """Install the SQLite connect hook (foreign keys + great_circle_km)."""

    @event.listens_for(engine, "connect")
    def on_connect(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        dbapi_connection.create_function(
            "great_circle_km", 4, great_circle_km, deterministic=True
        )


class DatabaseManager:
    """
    Process-wide owner of the engine and session factory.

    Both are built on first use, so tests and scripts can set DATABASE_URL
    before anything connects.

    Example:
        >>> with DatabaseManager().session_scope() as session:
        ...     session.query(Store).count()
        4
    """

    _instance: Optional[DatabaseManager] = None

    def __new__(cls) -> DatabaseManager:
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._settings = get_settings()
            instance._engine = None
            instance._sessions = None
            cls._instance = instance
        return cls._instance

    # =========================================================================
    # ENGINE
    # =========================================================================

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = self._build_engine(self._settings.database_url)
        return self._engine

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    def _build_engine(self, url: str) -> Engine:
        if url.startswith("sqlite"):
            engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                echo=self._settings.debug,
            )
            configure_sqlite_engine(engine)
        else:
            engine = create_engine(url, echo=self._settings.debug, **POSTGRES_POOL_OPTIONS)

        logger.info(f"🗄️ {engine.dialect.name} engine: {engine.url.render_as_string(hide_password=True)}")
        return engine

    def create_all(self) -> None:
        """Create missing tables from the ORM metadata (SQLite only)."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Tables created/verified from ORM metadata")

    def ping(self) -> bool:
        """True if a trivial query succeeds."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"❌ Database ping failed: {e}")
            return False
        return True

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Connection pool disposed")

    # =========================================================================
    # SESSIONS
    # =========================================================================

    def get_session(self) -> Session:
        """New session; the caller closes it."""
        if self._sessions is None:
            self._sessions = sessionmaker(
                bind=self.engine,
                autoflush=False,
                expire_on_commit=False,
            )
        return self._sessions()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Commit on success, roll back on error, always close."""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


@lru_cache(maxsize=1)
def get_database_manager() -> DatabaseManager:
    return DatabaseManager()


def get_db() -> Iterator[Session]:
    """Request-scoped session dependency for routes and the WebSocket."""
    session = get_database_manager().get_session()
    try:
        yield session
    finally:
        session.close()
