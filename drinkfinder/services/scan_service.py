"""
==============================================================================
Scan Service Module
==============================================================================

Barcode scan → inventory upsert workflow.

Scan Flow:
---------
    barcode ──▶ DrinkService.find_by_barcode ──▶ drink (404 if none)
                                                   │
    store_id ─────────────▶ store (404 if none)    │
    latitude/longitude ───▶ nearest store          │
                            (404 NO_STORES,        │
                             warning if far)       │
                                                   ▼
                       INSERT ... ON CONFLICT (store_id, drink_id)
                       DO UPDATE SET price, in_stock, last_updated

Repeating a scan with the same values leaves exactly one inventory row
with those values.

==============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from drinkfinder.config import Settings, get_settings
from drinkfinder.core import exceptions
from drinkfinder.db.models import EnergyDrink, Store, StoreInventory
from drinkfinder.schemas.scan import ScanRequest
from drinkfinder.services.drink_service import DrinkService
from drinkfinder.services.store_service import StoreService


# Module logger
logger = logging.getLogger(__name__)

DEFAULT_PRICE = 0.0

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@dataclass
class ScanResult:
    """Outcome of one recorded scan."""

    drink: EnergyDrink
    store: Store
    inventory: StoreInventory
    was_created: bool
    distance_km: Optional[float] = None
    warning: Optional[str] = None

    @property
    def message(self) -> str:
        if self.was_created:
            return f"Successfully added {self.drink.display_name} to {self.store.name}"
        return f"Updated {self.drink.display_name} at {self.store.name}"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "drink": self.drink.to_dict(),
            "store": self.store.to_dict(),
            "inventory": self.inventory.to_dict(),
            "was_created": self.was_created,
        }
        if self.warning:
            data["warning"] = self.warning
            data["distance_km"] = round(self.distance_km, 3)
        return data


class ScanService:
    """
    Records barcode scans as inventory reports.

    Example:
        >>> service = ScanService(db)
        >>> result = service.record_scan(ScanRequest(barcode="611269991000", store_id=1, price=2.99))
        >>> result.was_created
        True
    """

    def __init__(self, db: Session, settings: Optional[Settings] = None) -> None:
        self._db = db
        self._settings = settings or get_settings()
        self._drinks = DrinkService(db)
        self._stores = StoreService(db)

    @property
    def far_store_warning_km(self) -> float:
        return self._settings.far_store_warning_km

    # =========================================================================
    # STORE RESOLUTION
    # =========================================================================

    def resolve_store(
        self,
        store_id: Optional[int],
        latitude: Optional[float],
        longitude: Optional[float]
    ) -> Tuple[Store, Optional[float]]:
        """
        Find the store a scan belongs to.

        Returns:
            (store, distance_km); distance is None when store_id was given

        Raises:
            AppException: MISSING_LOCATION, STORE_NOT_FOUND, NO_STORES
        """
        if store_id is not None:
            return self._stores.get_by_id(store_id), None

        if latitude is None or longitude is None:
            raise exceptions.missing_location()

        nearest = self._stores.nearest(latitude, longitude)
        if nearest is None:
            raise exceptions.no_stores()

        return nearest

    # =========================================================================
    # INVENTORY UPSERT
    # =========================================================================

    def upsert_inventory(
        self,
        store_id: int,
        drink_id: int,
        price: float,
        in_stock: bool
    ) -> Tuple[StoreInventory, bool]:
        """
        Insert or overwrite the (store, drink) inventory row.

        Returns:
            (inventory row, True if the row was newly inserted)
        """
        dialect = self._db.get_bind().dialect.name
        insert = _INSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise RuntimeError(f"Inventory upsert not supported for dialect '{dialect}'")

        existed = self._db.query(StoreInventory.id).filter(
            StoreInventory.store_id == store_id,
            StoreInventory.drink_id == drink_id
        ).first() is not None

        table = StoreInventory.__table__
        stmt = insert(table).values(
            store_id=store_id,
            drink_id=drink_id,
            price=price,
            in_stock=in_stock,
            last_updated=func.now(),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.store_id, table.c.drink_id],
            set_={
                "price": stmt.excluded.price,
                "in_stock": stmt.excluded.in_stock,
                "last_updated": func.now(),
            },
        )

        try:
            self._db.execute(stmt)
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise

        inventory = self._db.query(StoreInventory).filter(
            StoreInventory.store_id == store_id,
            StoreInventory.drink_id == drink_id
        ).execution_options(populate_existing=True).one()

        return inventory, not existed

    # =========================================================================
    # SCAN WORKFLOW
    # =========================================================================

    def record_scan(self, request: ScanRequest) -> ScanResult:
        """
        Resolve store, then drink, then upsert the inventory row.

        Raises:
            AppException: MISSING_BARCODE, MISSING_LOCATION, DRINK_NOT_FOUND,
                STORE_NOT_FOUND, NO_STORES
        """
        if not request.barcode:
            raise exceptions.missing_barcode()

        store, distance_km = self.resolve_store(
            request.store_id, request.latitude, request.longitude
        )
        drink = self._drinks.get_by_barcode(request.barcode)

        warning = None
        if distance_km is not None and distance_km > self.far_store_warning_km:
            warning = (
                f"Nearest store '{store.name}' is {distance_km:.2f} km away; "
                "the scan was recorded there"
            )
            logger.warning(
                f"⚠️ Scan of {request.barcode} resolved to store #{store.id} "
                f"{distance_km:.2f} km away"
            )

        price = request.price if request.price is not None else DEFAULT_PRICE
        in_stock = request.in_stock if request.in_stock is not None else True

        inventory, was_created = self.upsert_inventory(store.id, drink.id, price, in_stock)

        result = ScanResult(
            drink=drink,
            store=store,
            inventory=inventory,
            was_created=was_created,
            distance_km=distance_km,
            warning=warning,
        )
        logger.info(f"📦 {result.message} (price={price}, in_stock={in_stock})")
        return result
