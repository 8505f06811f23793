"""
==============================================================================
Database Initialization Module
==============================================================================

Table creation and default account setup, run at application startup.

Initialization Flow:
-------------------
1. Create all tables from ORM models
2. Create the default account if no account exists yet
3. Verify the connection and log the outcome

Security Notes:
--------------
- The default credentials come from DEFAULT_ADMIN_USERNAME /
  DEFAULT_ADMIN_PASSWORD and should be changed after first login

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

from perfumeria.config import get_settings
from perfumeria.core.security import get_security_manager
from perfumeria.db.database import DatabaseManager
from perfumeria.db.models import User


# Module logger
logger = logging.getLogger(__name__)


class DatabaseInitializer:
    """
    Database initialization manager.

    Example:
        >>> initializer = DatabaseInitializer()
        >>> initializer.initialize()
    """

    def __init__(self, db_manager: Optional[DatabaseManager] = None) -> None:
        self._db_manager = db_manager or DatabaseManager()
        self._security = get_security_manager()
        self._settings = get_settings()

    def create_tables(self) -> None:
        """Create all database tables that don't exist yet."""
        logger.info("Creating database tables...")
        self._db_manager.create_tables()

    def create_default_admin(self) -> Optional[User]:
        """
        Create the default account if the users table is empty.

        Returns:
            Created User object, or None if an account already exists
        """
        with self._db_manager.session_scope() as session:
            if session.query(User).first() is not None:
                logger.debug("Accounts already exist, skipping default account")
                return None

            admin_user = User(
                username=self._settings.default_admin_username.lower(),
                password_hash=self._security.hash_password(
                    self._settings.default_admin_password
                ),
                is_active=True
            )
            session.add(admin_user)

        logger.info(f"✅ Default account created: {admin_user.username}")
        logger.warning("⚠️ Please change the default account password immediately!")
        return admin_user

    def initialize(self) -> None:
        """Create tables and the default account, then verify the connection."""
        self.create_tables()
        self.create_default_admin()

        if self._db_manager.verify_connection():
            logger.info("✅ Database connection verified")
        else:
            logger.warning("⚠️ Database connection check failed")


def init_db() -> None:
    """Initialize the database with tables and the default account."""
    DatabaseInitializer().initialize()
