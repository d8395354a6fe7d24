"""Authentication router."""

import logging

from fastapi import APIRouter, Depends, Request, status

from paharnama.dependencies.auth import get_current_user
from paharnama.dependencies.services import get_auth_service
from paharnama.models.user import User
from paharnama.rate_limiter import (
    CHANGE_PASSWORD_LIMIT,
    LOGIN_LIMIT,
    REFRESH_LIMIT,
    REGISTER_LIMIT,
    RESEND_VERIFICATION_LIMIT,
    VERIFY_EMAIL_LIMIT,
    limiter,
)
from paharnama.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    ResendVerificationRequest,
    VerifyEmailRequest,
)
from paharnama.schemas.common import ApiResponse
from paharnama.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(REGISTER_LIMIT)
def register(
    request: Request,
    data: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
) -> dict:
    """Register a new user and send verification email."""
    return auth.register(data.email, data.password, data.first_name, data.last_name)


@router.post("/login", response_model=ApiResponse)
@limiter.limit(LOGIN_LIMIT)
def login(
    request: Request,
    data: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
) -> dict:
    """Check credentials, then issue access/refresh tokens."""
    user = auth.authenticate(data.email, data.password)
    return auth.login(user)


@router.post("/verify-email", response_model=ApiResponse)
@limiter.limit(VERIFY_EMAIL_LIMIT)
def verify_email(
    request: Request,
    data: VerifyEmailRequest,
    auth: AuthService = Depends(get_auth_service),
) -> dict:
    """Verify email with token from email link."""
    return auth.verify_email(data.token)


@router.post("/resend-verification", response_model=ApiResponse)
@limiter.limit(RESEND_VERIFICATION_LIMIT)
def resend_verification(
    request: Request,
    data: ResendVerificationRequest,
    auth: AuthService = Depends(get_auth_service),
) -> dict:
    """Resend verification email (same response whether or not the email exists)."""
    return auth.resend_verification(data.email)


@router.post("/refresh", response_model=ApiResponse)
@limiter.limit(REFRESH_LIMIT)
def refresh_tokens(
    request: Request,
    data: RefreshTokenRequest,
    auth: AuthService = Depends(get_auth_service),
) -> dict:
    """Exchange a refresh token for a new token pair."""
    return auth.refresh_tokens(data.refresh_token)


@router.post("/logout", response_model=ApiResponse)
def logout(
    current_user: User = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
) -> dict:
    """Logout and revoke the stored refresh token."""
    return auth.logout(current_user.id)


@router.post("/change-password", response_model=ApiResponse)
@limiter.limit(CHANGE_PASSWORD_LIMIT)
def change_password(
    request: Request,
    data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
) -> dict:
    """Change password while logged in. Ends all sessions."""
    return auth.change_password(current_user.id, data.current_password, data.new_password)


@router.get("/me", response_model=ApiResponse)
def get_me(
    current_user: User = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
) -> dict:
    """Get the current authenticated user's profile."""
    return auth.get_profile(current_user)
