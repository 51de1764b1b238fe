"""
==============================================================================
Spatial Query Module
==============================================================================

Database-side distance expressions for store proximity queries.

The nearest-neighbour work is always done by the database:

    PostgreSQL  →  PostGIS geography (ST_DWithin / ST_Distance / <-> KNN)
    SQLite      →  great_circle_km() registered on each connection

Services never compute distances in Python; they ask a SpatialBackend for
SQL expressions and compose them into ordinary SQLAlchemy queries.

Usage:
------
    spatial = get_spatial_backend(session)
    distance = spatial.distance_km(lat, lon).label("distance_km")
    query = (
        session.query(Store, distance)
        .filter(spatial.within_km(lat, lon, radius_km))
        .order_by(spatial.nearest(lat, lon))
    )

==============================================================================
"""

from __future__ import annotations

import logging

from sqlalchemy import func, literal_column
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from drinkfinder.db.models import Store


# Module logger
logger = logging.getLogger(__name__)


class SpatialBackend:
    """SQL expression builder for distances between stores and a point."""

    dialect: str = ""

    def distance_km(self, latitude: float, longitude: float) -> ColumnElement:
        raise NotImplementedError

    def within_km(self, latitude: float, longitude: float, radius_km: float) -> ColumnElement:
        raise NotImplementedError

    def nearest(self, latitude: float, longitude: float) -> ColumnElement:
        """Ordering expression, nearest store first."""
        return self.distance_km(latitude, longitude)


class PostGISBackend(SpatialBackend):
    """
    PostGIS geography queries against the trigger-maintained
    `stores.location` column.
    """

    dialect = "postgresql"

    # Unmapped column; see db/models.py
    location = literal_column("stores.location")

    @staticmethod
    def point(latitude: float, longitude: float) -> ColumnElement:
        """ST_SetSRID(ST_MakePoint(lon, lat), 4326)::geography"""
        return func.geography(
            func.ST_SetSRID(func.ST_MakePoint(longitude, latitude), 4326)
        )

    def distance_km(self, latitude: float, longitude: float) -> ColumnElement:
        return func.ST_Distance(self.location, self.point(latitude, longitude)) / 1000.0

    def within_km(self, latitude: float, longitude: float, radius_km: float) -> ColumnElement:
        return func.ST_DWithin(
            self.location,
            self.point(latitude, longitude),
            radius_km * 1000.0
        )

    def nearest(self, latitude: float, longitude: float) -> ColumnElement:
        # KNN operator, served by the GIST index
        return self.location.op("<->")(self.point(latitude, longitude))


class SQLiteBackend(SpatialBackend):
    """
    Great-circle distance via the `great_circle_km` SQL function that
    DatabaseManager registers on every SQLite connection.
    """

    dialect = "sqlite"

    def distance_km(self, latitude: float, longitude: float) -> ColumnElement:
        return func.great_circle_km(Store.latitude, Store.longitude, latitude, longitude)

    def within_km(self, latitude: float, longitude: float, radius_km: float) -> ColumnElement:
        return self.distance_km(latitude, longitude) <= radius_km


_BACKENDS = {
    PostGISBackend.dialect: PostGISBackend,
    SQLiteBackend.dialect: SQLiteBackend,
}


def get_spatial_backend(session: Session) -> SpatialBackend:
    """
    Pick the spatial backend matching the session's database dialect.

    Raises:
        RuntimeError: If the dialect has no spatial support
    """
    dialect = session.get_bind().dialect.name
    backend_cls = _BACKENDS.get(dialect)

    if backend_cls is None:
        raise RuntimeError(f"No spatial backend for database dialect '{dialect}'")

    return backend_cls()
