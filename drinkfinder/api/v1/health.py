"""
==============================================================================
Health Check Endpoints
==============================================================================

GET /health         database reachability + catalog row counts
GET /health/ready   static readiness flag
GET /health/live    static liveness flag

==============================================================================
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from drinkfinder.core.dependencies import get_db
from drinkfinder.db.init_db import DatabaseInitializer


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Reports whether the database answers and whether the catalog has drinks."""

    def __init__(self, db: Session):
        self._db = db

    def database_reachable(self) -> bool:
        try:
            self._db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"❌ Health probe could not reach the database: {e}")
            return False
        return True

    def get_health(self) -> dict:
        if not self.database_reachable():
            return {
                "status": "degraded",
                "components": {"api": "healthy", "database": "unhealthy", "catalog": "unknown"},
                "details": {},
            }

        stats = DatabaseInitializer(session=self._db).get_stats()
        return {
            "status": "healthy",
            "components": {
                "api": "healthy",
                "database": "healthy",
                "catalog": "healthy" if stats["drinks"]["total"] else "empty",
            },
            "details": stats,
        }


@router.get("")
async def health_check(db: Session = Depends(get_db)):
    """API, database and catalog status with row counts."""
    return HealthController(db).get_health()


@router.get("/ready")
async def readiness_check():
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    return {"alive": True}
