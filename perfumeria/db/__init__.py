"""
==============================================================================
Database Package
==============================================================================

SQLAlchemy database infrastructure and ORM models.

Architecture:
------------
├── database.py   - DatabaseManager class, session dependency
├── models.py     - User and ProductRecord ORM models
└── init_db.py    - DatabaseInitializer for startup (import it directly,
                    it depends on perfumeria.core)

Usage:
------
    from perfumeria.db import DatabaseManager, ProductRecord

    with DatabaseManager().session_scope() as session:
        products = session.query(ProductRecord).all()

==============================================================================
"""

from .database import DatabaseManager, Base, get_db
from .models import User, ProductRecord

__all__ = [
    # Database management
    "DatabaseManager",
    "Base",
    "get_db",
    # Models
    "User",
    "ProductRecord",
]
