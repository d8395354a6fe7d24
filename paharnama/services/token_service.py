"""Issuing and validating session tokens and email verification tokens."""

import base64
import logging
import secrets
import time
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import jwt

from paharnama.config import settings
from paharnama.models.user import Role, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPair:
    """Access and refresh tokens minted together."""

    access_token: str
    refresh_token: str


class TokenService:
    """Signed JWT access/refresh tokens and opaque verification tokens."""

    ACCESS = "access"
    REFRESH = "refresh"

    @staticmethod
    def _encode(user: User, token_type: str, expires_delta: timedelta) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "role": Role(user.role or Role.USER).value,
            "type": token_type,
            "iat": now,
            "exp": now + expires_delta,
            # Unique per token so two tokens minted in the same second differ
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

    @staticmethod
    def create_access_token(user: User, expires_delta: timedelta | None = None) -> str:
        """Create a short-lived JWT access token."""
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
        return TokenService._encode(user, TokenService.ACCESS, expires_delta)

    @staticmethod
    def create_refresh_token(user: User, expires_delta: timedelta | None = None) -> str:
        """Create a longer-lived JWT refresh token."""
        if expires_delta is None:
            expires_delta = timedelta(days=settings.refresh_token_expire_days)
        return TokenService._encode(user, TokenService.REFRESH, expires_delta)

    @staticmethod
    def create_token_pair(user: User) -> TokenPair:
        """Create a fresh access/refresh pair for a user."""
        return TokenPair(
            access_token=TokenService.create_access_token(user),
            refresh_token=TokenService.create_refresh_token(user),
        )

    @staticmethod
    def decode_token(token: str, expected_type: str) -> dict | None:
        """Decode and validate a JWT.

        Returns None for a bad signature, malformed payload, expiry or a
        token of the wrong type. Callers see no further detail.
        """
        try:
            payload = jwt.decode(
                token,
                settings.jwt_secret_key,
                algorithms=[settings.jwt_algorithm],
                options={"require": ["exp", "iat", "sub", "type"]},
            )
        except jwt.ExpiredSignatureError:
            logger.debug("Token expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid token: {e}")
            return None

        if payload.get("type") != expected_type:
            logger.debug(f"Unexpected token type: {payload.get('type')}")
            return None
        return payload

    @staticmethod
    def generate_verification_token() -> str:
        """Create an opaque, URL-safe email verification token.

        Built from the current time in milliseconds and two random
        components, then base64url-encoded without padding.
        """
        raw = f"{int(time.time() * 1000)}-{secrets.token_hex(8)}-{secrets.token_hex(8)}"
        return base64.urlsafe_b64encode(raw.encode("ascii")).rstrip(b"=").decode("ascii")
