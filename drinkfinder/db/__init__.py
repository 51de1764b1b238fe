"""
==============================================================================
Database Package
==============================================================================

SQLAlchemy database infrastructure and ORM models.

Architecture:
------------
├── database.py    - DatabaseManager class, session factory, get_db
├── models.py      - Store, EnergyDrink, StoreInventory
├── spatial.py     - PostGIS / SQLite distance expressions
├── migrations.py  - MigrationRunner for sql/NNN_*.sql
└── init_db.py     - DatabaseInitializer for startup

==============================================================================
"""

from .database import Base, DatabaseManager, get_database_manager, get_db
from .models import EnergyDrink, Store, StoreInventory
from .init_db import DatabaseInitializer, init_db

__all__ = [
    # Database management
    "Base",
    "DatabaseManager",
    "get_database_manager",
    "get_db",
    # Models
    "Store",
    "EnergyDrink",
    "StoreInventory",
    # Initialization
    "DatabaseInitializer",
    "init_db",
]
