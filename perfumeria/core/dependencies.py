"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection for authentication and catalog storage.

Dependency Hierarchy:
--------------------
                    ┌─────────────────┐
                    │    get_db()     │
                    └────────┬────────┘
                             │
             ┌───────────────┴───────────────┐
             │                               │
    ┌────────▼────────┐             ┌────────▼──────────┐
    │get_current_user │             │ get_catalog_store │
    └─────────────────┘             └───────────────────┘

Usage Examples:
--------------
    # Protect every route of a router
    router = APIRouter(dependencies=[Depends(get_current_user)])

    # Receive the catalog store
    @router.get("/products")
    async def list_products(store: CatalogStore = Depends(get_catalog_store)):
        ...

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from perfumeria.catalog.sql_store import SqlCatalogStore
from perfumeria.catalog.store import CatalogStore
from perfumeria.core import exceptions
from perfumeria.core.security import SecurityManager, get_security_manager
from perfumeria.db.database import get_db
from perfumeria.db.models import User


# Module logger
logger = logging.getLogger(__name__)

# HTTP Bearer security scheme for Swagger UI; missing headers are handled
# by AuthenticationManager so the response uses the AppException format
security_scheme = HTTPBearer(auto_error=False)


class AuthenticationManager:
    """
    Resolves the bearer token of a request to an active User.

    Attributes:
        _security: SecurityManager instance for token operations
        _db: Database session for user queries

    Example:
        >>> auth = AuthenticationManager(security_manager, db_session)
        >>> user = auth.get_current_user(credentials)
    """

    def __init__(self, security: SecurityManager, db: Session) -> None:
        self._security = security
        self._db = db

    def extract_token_from_header(
        self,
        credentials: Optional[HTTPAuthorizationCredentials]
    ) -> str:
        """
        Extract JWT token from the Authorization header.

        Raises:
            AppException: UNAUTHORIZED (401) if no bearer token was sent
        """
        if not credentials or not credentials.credentials:
            logger.debug("No authorization credentials provided")
            raise exceptions.unauthorized()

        return credentials.credentials

    def authenticate_from_token(self, token: str) -> User:
        """
        Verify an access token and load its user.

        Raises:
            AppException: TOKEN_EXPIRED (403) if the token fails verification
            AppException: TOKEN_INVALID (403) if the subject is missing or unknown
            AppException: ACCOUNT_DISABLED (403) if the user is inactive
        """
        payload = self._security.verify_token(token, SecurityManager.TOKEN_TYPE_ACCESS)

        if not payload:
            raise exceptions.token_expired()

        user_id = payload.get("sub")

        if not user_id:
            logger.warning("Token payload missing 'sub' claim")
            raise exceptions.token_invalid()

        user = self._db.get(User, user_id)

        if not user:
            logger.warning(f"User not found for token: {user_id}")
            raise exceptions.token_invalid()

        if not user.is_active:
            logger.warning(f"Disabled user attempted access: {user.username}")
            raise exceptions.account_disabled()

        return user

    def get_current_user(
        self,
        credentials: Optional[HTTPAuthorizationCredentials]
    ) -> User:
        token = self.extract_token_from_header(credentials)
        return self.authenticate_from_token(token)


# =============================================================================
# FASTAPI DEPENDENCY FUNCTIONS
# =============================================================================

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    FastAPI dependency returning the authenticated user.

    Usage:
        @router.get("/me")
        async def me(user: User = Depends(get_current_user)):
            return {"username": user.username}
    """
    auth_manager = AuthenticationManager(get_security_manager(), db)
    return auth_manager.get_current_user(credentials)


def get_catalog_store(db: Session = Depends(get_db)) -> CatalogStore:
    """
    FastAPI dependency returning the request's CatalogStore.

    Override it in tests to run the API against InMemoryCatalogStore:

        app.dependency_overrides[get_catalog_store] = lambda: store
    """
    return SqlCatalogStore(db)
