"""
==============================================================================
Authentication Endpoints
==============================================================================

Account registration, login and token refresh. These routes are public.

==============================================================================
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from perfumeria.db.database import get_db
from perfumeria.db.models import User
from perfumeria.services.auth_service import AuthService
from perfumeria.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    RefreshRequest,
    RegisterResponse,
    TokenResponse,
    UserInfo,
)


router = APIRouter(tags=["Authentication"])


class AuthController:
    """Controller for authentication operations."""

    def __init__(self, db: Session):
        self._service = AuthService(db)

    def register(self, request: RegisterRequest) -> RegisterResponse:
        user = self._service.register(request.username, request.password)
        return RegisterResponse(user=UserInfo.model_validate(user))

    def login(self, request: LoginRequest) -> TokenResponse:
        """Authenticate user and generate tokens."""
        user, access_token, refresh_token = self._service.authenticate(
            request.username,
            request.password
        )
        return self._token_response(user, access_token, refresh_token)

    def refresh(self, request: RefreshRequest) -> TokenResponse:
        """Exchange a refresh token for a new token pair."""
        user, access_token, refresh_token = self._service.refresh_tokens(
            request.refresh_token
        )
        return self._token_response(user, access_token, refresh_token)

    def _token_response(self, user: User, access_token: str, refresh_token: str) -> TokenResponse:
        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self._service.get_token_expiry_seconds(),
            user=UserInfo.model_validate(user)
        )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: Session = Depends(get_db)):
    """Create a new account."""
    controller = AuthController(db)
    return controller.register(request)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Authenticate user and get tokens."""
    controller = AuthController(db)
    return controller.login(request)


@router.post("/token", response_model=TokenResponse)
async def refresh_token(request: RefreshRequest, db: Session = Depends(get_db)):
    """Refresh access token using refresh token."""
    controller = AuthController(db)
    return controller.refresh(request)
