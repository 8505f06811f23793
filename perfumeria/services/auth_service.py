"""
==============================================================================
Authentication Service Module
==============================================================================

Account registration, login and token refresh.

Authentication Flow:
-------------------
    ┌─────────────┐
    │   Login     │
    │  Request    │
    └──────┬──────┘
           │
    ┌──────▼──────┐     ┌─────────────┐
    │ Find User   │────▶│ User Not    │ → INVALID_CREDENTIALS
    └──────┬──────┘     │   Found     │
           │            └─────────────┘
    ┌──────▼──────┐     ┌─────────────┐
    │  Verify     │────▶│  Password   │ → INVALID_CREDENTIALS
    │  Password   │     │   Wrong     │
    └──────┬──────┘     └─────────────┘
           │
    ┌──────▼──────┐     ┌─────────────┐
    │   Check     │────▶│  Account    │ → ACCOUNT_DISABLED
    │   Active    │     │  Disabled   │
    └──────┬──────┘     └─────────────┘
           │
    ┌──────▼──────┐
    │  Generate   │
    │   Tokens    │
    └─────────────┘

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from perfumeria.config import get_settings
from perfumeria.core import exceptions
from perfumeria.core.security import SecurityManager, get_security_manager
from perfumeria.db.models import User


# Module logger
logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for account and token management.

    Attributes:
        _db: Database session for user queries
        _security: SecurityManager for crypto operations

    Example:
        >>> auth_service = AuthService(db_session)
        >>> auth_service.register("maria", "secret123")
        >>> user, access, refresh = auth_service.authenticate("maria", "secret123")
        >>> user, access, refresh = auth_service.refresh_tokens(refresh)
    """

    def __init__(
        self,
        db: Session,
        security: Optional[SecurityManager] = None
    ) -> None:
        self._db = db
        self._security = security or get_security_manager()
        self._settings = get_settings()

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def register(self, username: str, password: str) -> User:
        """
        Create a new account.

        Raises:
            AppException: USERNAME_EXISTS if the username is taken
        """
        normalized_username = username.lower().strip()

        existing = self._db.query(User).filter(
            User.username == normalized_username
        ).first()

        if existing:
            logger.warning(f"Registration failed: username exists - {normalized_username}")
            raise exceptions.username_exists(normalized_username)

        user = User(
            username=normalized_username,
            password_hash=self._security.hash_password(password),
            is_active=True
        )
        self._db.add(user)

        try:
            self._db.commit()
        except IntegrityError:
            self._db.rollback()
            raise exceptions.username_exists(normalized_username)

        self._db.refresh(user)
        logger.info(f"✅ User registered: {user.username}")
        return user

    # =========================================================================
    # AUTHENTICATION METHODS
    # =========================================================================

    def authenticate(self, username: str, password: str) -> Tuple[User, str, str]:
        """
        Authenticate user with username and password.

        Returns:
            Tuple of (User, access_token, refresh_token)

        Raises:
            AppException: INVALID_CREDENTIALS if user not found or password wrong
            AppException: ACCOUNT_DISABLED if user is inactive
        """
        normalized_username = username.lower().strip()

        user = self._db.query(User).filter(
            User.username == normalized_username
        ).first()

        if not user:
            logger.warning(f"Login failed: user not found - {normalized_username}")
            raise exceptions.invalid_credentials()

        if not self._security.verify_password(password, user.password_hash):
            logger.warning(f"Login failed: invalid password - {normalized_username}")
            raise exceptions.invalid_credentials()

        if not user.is_active:
            logger.warning(f"Login failed: account disabled - {normalized_username}")
            raise exceptions.account_disabled()

        access_token, refresh_token = self._generate_tokens(user)

        logger.info(f"✅ User authenticated: {user.username}")

        return user, access_token, refresh_token

    def refresh_tokens(self, refresh_token: str) -> Tuple[User, str, str]:
        """
        Issue a new token pair from a valid refresh token.

        Raises:
            AppException: TOKEN_EXPIRED if the refresh token is invalid or expired
            AppException: TOKEN_INVALID if the token has no usable subject
            AppException: ACCOUNT_DISABLED if user is inactive
        """
        payload = self._security.verify_token(refresh_token, SecurityManager.TOKEN_TYPE_REFRESH)

        if not payload:
            logger.warning("Token refresh failed: invalid or expired token")
            raise exceptions.token_expired()

        user = self.get_user(payload.get("sub"))

        if not user:
            logger.warning("Token refresh failed: unknown subject")
            raise exceptions.token_invalid()

        if not user.is_active:
            logger.warning(f"Token refresh failed: account disabled - {user.username}")
            raise exceptions.account_disabled()

        access_token, new_refresh_token = self._generate_tokens(user)

        logger.info(f"✅ Tokens refreshed for: {user.username}")

        return user, access_token, new_refresh_token

    def get_user(self, user_id: Optional[str]) -> Optional[User]:
        """Load a user by id, None if the id is empty or unknown."""
        if not user_id:
            return None
        return self._db.get(User, user_id)

    # =========================================================================
    # TOKEN GENERATION
    # =========================================================================

    def _generate_tokens(self, user: User) -> Tuple[str, str]:
        token_data = {
            "sub": user.id,
            "username": user.username,
        }

        access_token = self._security.create_access_token(token_data)
        refresh_token = self._security.create_refresh_token(token_data)

        return access_token, refresh_token

    def get_token_expiry_seconds(self) -> int:
        """Get access token expiration time in seconds."""
        return self._settings.access_token_expire_seconds
