"""
==============================================================================
SQLAlchemy ORM Models Module
==============================================================================

ORM models for the energy drink catalog, store locations and inventory.

This module defines:
- Store: Physical retail location
- EnergyDrink: Catalog product (brand + flavor + size)
- StoreInventory: Price and stock state of a drink at a store

Database Schema:
---------------

    ┌─────────────────────────────────────────────────────────────────┐
    │                            stores                                │
    ├─────────────────────────────────────────────────────────────────┤
    │ id (INTEGER, PK)                                                │
    │ name (VARCHAR 255, NOT NULL)                                    │
    │ address (VARCHAR 500, NOT NULL)                                 │
    │ city (VARCHAR 100) / state (VARCHAR 2) / zip_code (VARCHAR 10)  │
    │ latitude NUMERIC(10,8) / longitude NUMERIC(11,8)                │
    │ phone (VARCHAR 20, NULLABLE)                                    │
    │ hours_json (JSON, NULLABLE)                                     │
    │ created_at / updated_at                                         │
    │ location GEOGRAPHY(POINT,4326)   -- PostgreSQL only, trigger    │
    └─────────────────────────────────────────────────────────────────┘
                                    │
                                    │ 1:N (CASCADE DELETE)
                                    ▼
    ┌─────────────────────────────────────────────────────────────────┐
    │                        store_inventory                           │
    ├─────────────────────────────────────────────────────────────────┤
    │ id (INTEGER, PK)                                                │
    │ store_id (FK → stores.id)                                       │
    │ drink_id (FK → energy_drinks.id)                                │
    │ price NUMERIC(6,2)                                              │
    │ in_stock (BOOLEAN, DEFAULT true)                                │
    │ last_updated (refreshed on every write)                         │
    │ UNIQUE (store_id, drink_id)                                     │
    └─────────────────────────────────────────────────────────────────┘
                                    ▲
                                    │ 1:N (CASCADE DELETE)
                                    │
    ┌─────────────────────────────────────────────────────────────────┐
    │                         energy_drinks                            │
    ├─────────────────────────────────────────────────────────────────┤
    │ id (INTEGER, PK)                                                │
    │ brand / flavor (VARCHAR 100, NOT NULL)                          │
    │ size_ml (INTEGER, NOT NULL)                                     │
    │ caffeine_mg / calories (INTEGER) / sugar_g NUMERIC(5,2)         │
    │ description (TEXT) / image_url (VARCHAR 500)                    │
    │ barcode (VARCHAR 20, UNIQUE, NULLABLE)                          │
    │ created_at                                                      │
    │ UNIQUE (brand, flavor, size_ml)                                 │
    └─────────────────────────────────────────────────────────────────┘

The PostgreSQL `location` column is deliberately not mapped: it is derived
from latitude/longitude by the `store_location_trigger` created in
`db/sql/001_initial_schema.sql`, and spatial queries reference it directly.

=============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, relationship

from drinkfinder.db.database import Base


# =============================================================================
# STORE MODEL
# =============================================================================

class Store(Base):
    """
    Retail location that may stock energy drinks.

    Attributes:
        id: Auto-increment primary key
        name: Display name (e.g. "7-Eleven Downtown")
        address: Street address
        city: City name
        state: Two-letter state code (may be empty for imported stations)
        zip_code: Postal code
        latitude: WGS84 latitude
        longitude: WGS84 longitude
        phone: Optional phone number
        hours_json: Optional opening hours document
    """

    __tablename__ = "stores"
    __table_args__ = (
        Index("idx_stores_city_state", "city", "state"),
        Index("idx_stores_zip", "zip_code"),
    )

    id: int = Column(Integer, primary_key=True, autoincrement=True)

    name: str = Column(String(255), nullable=False)

    address: str = Column(String(500), nullable=False)

    city: str = Column(String(100), nullable=False)

    state: str = Column(String(2), nullable=False)

    zip_code: str = Column(String(10), nullable=False)

    latitude: float = Column(
        Numeric(10, 8, asdecimal=False),
        nullable=False,
        doc="WGS84 latitude in degrees"
    )

    longitude: float = Column(
        Numeric(11, 8, asdecimal=False),
        nullable=False,
        doc="WGS84 longitude in degrees"
    )

    phone: Optional[str] = Column(String(20), nullable=True)

    hours_json: Optional[Dict[str, Any]] = Column(JSON, nullable=True)

    created_at: datetime = Column(
        DateTime(timezone=True),
        default=func.now(),
        nullable=False
    )

    updated_at: datetime = Column(
        DateTime(timezone=True),
        default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    inventory: Mapped[List["StoreInventory"]] = relationship(
        "StoreInventory",
        back_populates="store",
        cascade="all, delete-orphan",
        passive_deletes=True,
        doc="Inventory rows for this store"
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "latitude": float(self.latitude) if self.latitude is not None else None,
            "longitude": float(self.longitude) if self.longitude is not None else None,
            "phone": self.phone,
            "hours_json": self.hours_json,
        }

    def __repr__(self) -> str:
        return f"Store(id={self.id!r}, name={self.name!r}, city={self.city!r})"


# =============================================================================
# ENERGY DRINK MODEL
# =============================================================================

class EnergyDrink(Base):
    """
    Catalog product.

    A drink is identified by (brand, flavor, size_ml); the barcode is an
    optional secondary unique key used by the scan workflow.
    """

    __tablename__ = "energy_drinks"
    __table_args__ = (
        UniqueConstraint("brand", "flavor", "size_ml", name="energy_drinks_brand_flavor_size_ml_key"),
        Index("idx_drinks_brand", "brand"),
        Index("idx_drinks_flavor", "flavor"),
    )

    id: int = Column(Integer, primary_key=True, autoincrement=True)

    brand: str = Column(String(100), nullable=False)

    flavor: str = Column(String(100), nullable=False)

    size_ml: int = Column(Integer, nullable=False)

    caffeine_mg: Optional[int] = Column(Integer, nullable=True)

    sugar_g: Optional[float] = Column(Numeric(5, 2, asdecimal=False), nullable=True)

    calories: Optional[int] = Column(Integer, nullable=True)

    description: Optional[str] = Column(Text, nullable=True)

    image_url: Optional[str] = Column(String(500), nullable=True)

    barcode: Optional[str] = Column(
        String(20),
        unique=True,
        nullable=True,
        index=True,
        doc="UPC-A / EAN-13 barcode"
    )

    created_at: datetime = Column(
        DateTime(timezone=True),
        default=func.now(),
        nullable=False
    )

    inventory: Mapped[List["StoreInventory"]] = relationship(
        "StoreInventory",
        back_populates="drink",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    @property
    def display_name(self) -> str:
        return f"{self.brand} {self.flavor}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "brand": self.brand,
            "flavor": self.flavor,
            "size_ml": self.size_ml,
            "caffeine_mg": self.caffeine_mg,
            "sugar_g": float(self.sugar_g) if self.sugar_g is not None else None,
            "calories": self.calories,
            "description": self.description,
            "image_url": self.image_url,
            "barcode": self.barcode,
        }

    def __repr__(self) -> str:
        return (
            f"EnergyDrink(id={self.id!r}, brand={self.brand!r}, "
            f"flavor={self.flavor!r}, size_ml={self.size_ml!r})"
        )

    def __str__(self) -> str:
        return self.display_name


# =============================================================================
# STORE INVENTORY MODEL
# =============================================================================

class StoreInventory(Base):
    """
    Price and availability of one drink at one store.

    At most one row exists per (store_id, drink_id); the scan workflow
    upserts against that key.
    """

    __tablename__ = "store_inventory"
    __table_args__ = (
        UniqueConstraint("store_id", "drink_id", name="store_inventory_store_id_drink_id_key"),
        Index("idx_inventory_in_stock", "in_stock"),
    )

    id: int = Column(Integer, primary_key=True, autoincrement=True)

    store_id: int = Column(
        Integer,
        ForeignKey("stores.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    drink_id: int = Column(
        Integer,
        ForeignKey("energy_drinks.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    price: float = Column(Numeric(6, 2, asdecimal=False), nullable=False)

    in_stock: bool = Column(Boolean, default=True, nullable=False)

    last_updated: datetime = Column(
        DateTime(timezone=True),
        default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    store: Mapped["Store"] = relationship("Store", back_populates="inventory")

    drink: Mapped["EnergyDrink"] = relationship("EnergyDrink", back_populates="inventory")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "store_id": self.store_id,
            "drink_id": self.drink_id,
            "price": float(self.price) if self.price is not None else None,
            "in_stock": self.in_stock,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }

    def __repr__(self) -> str:
        return (
            f"StoreInventory(store_id={self.store_id!r}, drink_id={self.drink_id!r}, "
            f"price={self.price!r}, in_stock={self.in_stock!r})"
        )
