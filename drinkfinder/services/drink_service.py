"""
==============================================================================
Drink Service Module
==============================================================================

Catalog operations for energy drinks.

This module implements:
- DrinkService: autocomplete, listing, CRUD, barcode lookup, statistics

Uniqueness:
----------
- (brand, flavor, size_ml) identifies a drink     → DRINK_EXISTS (409)
- barcode is unique when present                  → BARCODE_EXISTS (409)

Barcode lookup:
--------------
Scanners report UPC-A (12 digits) or EAN-13 (13 digits, leading 0), and
ingested barcodes are stored zero-stripped. Lookups try an exact match
first, then compare with leading zeros removed on both sides.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import asc, desc, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from drinkfinder.config import get_settings
from drinkfinder.core import exceptions
from drinkfinder.db.models import EnergyDrink
from drinkfinder.schemas.drink import DrinkCreate, DrinkUpdate


# Module logger
logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "id": EnergyDrink.id,
    "brand": EnergyDrink.brand,
    "flavor": EnergyDrink.flavor,
    "size_ml": EnergyDrink.size_ml,
    "caffeine_mg": EnergyDrink.caffeine_mg,
    "created_at": EnergyDrink.created_at,
}

SORT_ORDERS = {"asc": asc, "desc": desc}


class DrinkService:
    """
    Energy drink catalog service.

    Example:
        >>> service = DrinkService(db)
        >>> service.autocomplete("monst")
        [EnergyDrink(id=3, brand='Monster', flavor='Original', size_ml=473), ...]
        >>> service.get_by_barcode("70847811169")
        EnergyDrink(id=3, ...)
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    def autocomplete(self, query: Optional[str], limit: Optional[int] = None) -> List[EnergyDrink]:
        """
        Case-insensitive substring match on brand or flavor.

        LIKE wildcards in the query are matched literally.
        """
        query = (query or "").strip()
        if not query:
            return []

        limit = limit or get_settings().autocomplete_limit

        return self._db.query(EnergyDrink).filter(
            or_(
                EnergyDrink.brand.icontains(query, autoescape=True),
                EnergyDrink.flavor.icontains(query, autoescape=True),
            )
        ).order_by(
            EnergyDrink.brand, EnergyDrink.flavor, EnergyDrink.size_ml
        ).limit(limit).all()

    def list_drinks(
        self,
        brand: Optional[str] = None,
        sort_by: str = "brand",
        sort_order: str = "asc"
    ) -> List[EnergyDrink]:
        """
        List the catalog with optional brand filter and whitelisted sorting.

        Raises:
            AppException: INVALID_SORT for unknown sort field or order
        """
        column = SORTABLE_FIELDS.get(sort_by)
        if column is None:
            raise exceptions.invalid_sort(sort_by, sorted(SORTABLE_FIELDS))

        direction = SORT_ORDERS.get((sort_order or "").lower())
        if direction is None:
            raise exceptions.invalid_sort(sort_order, sorted(SORT_ORDERS))

        query = self._db.query(EnergyDrink)

        if brand and brand.strip():
            query = query.filter(EnergyDrink.brand.icontains(brand.strip(), autoescape=True))

        return query.order_by(
            direction(column), EnergyDrink.flavor, EnergyDrink.id
        ).all()

    def get_by_id(self, drink_id: int) -> EnergyDrink:
        drink = self._db.get(EnergyDrink, drink_id)
        if drink is None:
            raise exceptions.drink_not_found(drink_id=drink_id)
        return drink

    def find_by_barcode(self, barcode: str) -> Optional[EnergyDrink]:
        """Exact barcode match, then a match ignoring leading zeros."""
        barcode = (barcode or "").strip()
        if not barcode:
            return None

        drink = self._db.query(EnergyDrink).filter(
            EnergyDrink.barcode == barcode
        ).first()
        if drink is not None:
            return drink

        stripped = barcode.lstrip("0")
        if not stripped:
            return None

        drink = self._db.query(EnergyDrink).filter(
            func.ltrim(EnergyDrink.barcode, "0") == stripped
        ).order_by(EnergyDrink.id).first()

        if drink is not None:
            logger.debug(f"Barcode {barcode} matched {drink.barcode} ignoring leading zeros")

        return drink

    def get_by_barcode(self, barcode: str) -> EnergyDrink:
        drink = self.find_by_barcode(barcode)
        if drink is None:
            raise exceptions.drink_not_found(barcode=barcode)
        return drink

    def get_stats(self) -> Dict[str, Any]:
        """Per-brand counts and barcode coverage."""
        count = func.count(EnergyDrink.id)
        brand_rows = self._db.query(EnergyDrink.brand, count).group_by(
            EnergyDrink.brand
        ).order_by(desc(count), EnergyDrink.brand).all()

        total = sum(row[1] for row in brand_rows)
        with_barcode = self._db.query(func.count(EnergyDrink.id)).filter(
            EnergyDrink.barcode.isnot(None)
        ).scalar()

        return {
            "total": total,
            "brands": [{"brand": brand, "count": n} for brand, n in brand_rows],
            "barcodes": {
                "with_barcode": with_barcode,
                "without_barcode": total - with_barcode,
            },
        }

    # =========================================================================
    # WRITE OPERATIONS
    # =========================================================================

    def _ensure_unique(
        self,
        brand: str,
        flavor: str,
        size_ml: int,
        barcode: Optional[str],
        exclude_id: Optional[int] = None
    ) -> None:
        query = self._db.query(EnergyDrink).filter(
            EnergyDrink.brand == brand,
            EnergyDrink.flavor == flavor,
            EnergyDrink.size_ml == size_ml
        )
        if exclude_id is not None:
            query = query.filter(EnergyDrink.id != exclude_id)
        if query.first() is not None:
            raise exceptions.drink_exists(brand, flavor, size_ml)

        if barcode:
            query = self._db.query(EnergyDrink).filter(EnergyDrink.barcode == barcode)
            if exclude_id is not None:
                query = query.filter(EnergyDrink.id != exclude_id)
            if query.first() is not None:
                raise exceptions.barcode_exists(barcode)

    def _commit(self, drink: EnergyDrink) -> None:
        identity = (drink.brand, drink.flavor, drink.size_ml)
        try:
            self._db.commit()
        except IntegrityError as e:
            self._db.rollback()
            logger.warning(f"Integrity error saving drink: {e.orig}")
            raise exceptions.drink_exists(*identity)
        self._db.refresh(drink)

    def create(self, data: DrinkCreate) -> EnergyDrink:
        """
        Add a drink to the catalog.

        Raises:
            AppException: DRINK_EXISTS or BARCODE_EXISTS
        """
        self._ensure_unique(data.brand, data.flavor, data.size_ml, data.barcode)

        drink = EnergyDrink(**data.model_dump())
        self._db.add(drink)
        self._commit(drink)

        logger.info(f"✅ Drink created: {drink.brand} {drink.flavor} ({drink.size_ml}ml)")
        return drink

    def update(self, drink_id: int, data: DrinkUpdate) -> EnergyDrink:
        """Apply the fields present in the request."""
        drink = self.get_by_id(drink_id)
        changes = data.model_dump(exclude_unset=True)

        # identity columns are NOT NULL; an explicit null leaves them unchanged
        for key in ("brand", "flavor", "size_ml"):
            if key in changes and changes[key] is None:
                changes.pop(key)

        if not changes:
            return drink

        self._ensure_unique(
            changes.get("brand", drink.brand),
            changes.get("flavor", drink.flavor),
            changes.get("size_ml", drink.size_ml),
            changes.get("barcode", drink.barcode),
            exclude_id=drink.id,
        )

        for key, value in changes.items():
            setattr(drink, key, value)
        self._commit(drink)

        logger.info(f"✏️ Drink updated: #{drink.id} {sorted(changes)}")
        return drink

    def delete(self, drink_id: int) -> Dict[str, Any]:
        """
        Delete a drink; its inventory rows cascade.

        Returns:
            The deleted drink's data
        """
        drink = self.get_by_id(drink_id)
        snapshot = drink.to_dict()

        self._db.delete(drink)
        self._db.commit()

        logger.info(f"🗑️ Drink deleted: #{drink_id} {snapshot['brand']} {snapshot['flavor']}")
        return snapshot
