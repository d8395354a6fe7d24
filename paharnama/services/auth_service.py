"""Authentication flows: registration, email verification, sessions and passwords.

AuthService coordinates the user and verification repositories, the token
and hashing services, and email delivery. It owns every state transition
and commits each operation as one transaction. Email is best-effort: a
delivery failure is logged and never changes the outcome of the operation.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from paharnama.config import settings
from paharnama.exceptions import BadRequestError, ConflictError, NotFoundError, UnauthorizedError
from paharnama.models.user import User
from paharnama.schemas.auth import UserProfile
from paharnama.services.email_service import EmailService
from paharnama.services.password_hasher import PasswordHasher
from paharnama.services.repositories import (
    DuplicateError,
    EmailVerificationRepository,
    UserRepository,
)
from paharnama.services.repositories.user_repository import normalize_email
from paharnama.services.security_audit_service import (
    RequestContext,
    SecurityAuditService,
    SecurityEventType,
)
from paharnama.services.token_service import TokenService

logger = logging.getLogger(__name__)

RESEND_VERIFICATION_MESSAGE = (
    "If an account with this email exists, a verification email has been sent."
)
INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"
INVALID_CREDENTIALS = "Invalid email or password"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    """SQLite returns naive datetimes; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def sanitize_user(user: User) -> dict:
    """Public view of a user: no password hash, no token hashes."""
    return UserProfile.model_validate(user).model_dump(mode="json")


class AuthService:
    """Orchestrates the authentication token lifecycle."""

    def __init__(
        self,
        db: Session,
        email_service: type[EmailService] = EmailService,
        context: RequestContext | None = None,
    ) -> None:
        self._db = db
        self._users = UserRepository(db)
        self._verifications = EmailVerificationRepository(db)
        self._email = email_service
        self._context = context or RequestContext()

    # Registration and email verification

    def register(
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> dict:
        """Create an unverified account and send a verification link.

        Raises:
            ConflictError: If the (case-insensitive) email is already registered.
        """
        email = normalize_email(email)
        if self._users.find_by_email(email):
            raise ConflictError("User with this email already exists")

        try:
            user = self._users.create(
                email=email,
                password_hash=PasswordHasher.hash_password(password),
                first_name=first_name,
                last_name=last_name,
                is_verified=False,
            )
        except DuplicateError as e:
            # Lost a race with a concurrent registration of the same email
            self._db.rollback()
            raise ConflictError("User with this email already exists") from e

        token = self._issue_verification_token(user)
        self._audit(SecurityEventType.USER_REGISTERED, user_id=user.id)
        self._db.commit()

        self._deliver(
            "verification", self._email.send_verification_email, user.email, user.first_name, token
        )

        logger.info(f"User registered (pending verification): {user.email}")
        return {
            "success": True,
            "message": "Registration successful. Please check your email to verify your account.",
            "data": {"user": sanitize_user(user)},
        }

    def verify_email(self, token: str) -> dict:
        """Consume a verification token and mark its owner verified.

        Raises:
            BadRequestError: If the token is unknown, already used or expired.
        """
        verification = self._verifications.find_by_token(token)
        if verification is None:
            raise BadRequestError("Invalid verification token")
        if verification.used_at is not None:
            raise BadRequestError("This verification link has already been used")
        if _utcnow() > _as_utc(verification.expires_at):
            raise BadRequestError("Verification link has expired. Please request a new one.")

        now = _utcnow()
        # Conditional update: a concurrent request consuming the same token matches no row
        if not self._verifications.mark_used(verification.id, now):
            self._db.rollback()
            raise BadRequestError("This verification link has already been used")
        self._verifications.invalidate_unused_for_user(verification.user_id, now)

        user = self._users.find_by_id(verification.user_id)
        self._users.update(user, is_verified=True)
        self._audit(SecurityEventType.EMAIL_VERIFIED, user_id=user.id)
        self._db.commit()

        self._deliver("welcome", self._email.send_welcome_email, user.email, user.first_name)

        logger.info(f"Email verified for user: {user.email}")
        return {
            "success": True,
            "message": "Email verified successfully. You can now log in.",
        }

    def resend_verification(self, email: str) -> dict:
        """Issue a new verification token, invalidating the previous ones.

        The response is identical whether or not the account exists.

        Raises:
            BadRequestError: If the account is already verified.
        """
        user = self._users.find_by_email(email)
        if user is None:
            logger.info("Verification resend requested for unknown email")
            return {"success": True, "message": RESEND_VERIFICATION_MESSAGE}

        if user.is_verified:
            raise BadRequestError("This email is already verified")

        self._verifications.invalidate_unused_for_user(user.id, _utcnow())
        token = self._issue_verification_token(user)
        self._db.commit()

        self._deliver(
            "verification", self._email.send_verification_email, user.email, user.first_name, token
        )

        logger.info(f"Verification email resent to: {user.email}")
        return {"success": True, "message": RESEND_VERIFICATION_MESSAGE}

    # Sessions

    def validate_user(self, email: str, password: str) -> User | None:
        """Check credentials.

        Returns None for an unknown email or a wrong password alike.

        Raises:
            UnauthorizedError: If the credentials match a deactivated account.
        """
        user = self._users.find_by_email(email)
        if user is None:
            # Dummy verification so response time does not reveal unknown emails
            PasswordHasher.verify_password(password, PasswordHasher.get_dummy_hash())
            return None

        if not PasswordHasher.verify_password(password, user.password_hash):
            return None

        if not user.is_active:
            raise UnauthorizedError("Your account has been deactivated")

        return user

    def authenticate(self, email: str, password: str) -> User:
        """Credential check step in front of login.

        Raises:
            UnauthorizedError: For bad credentials or a deactivated account.
        """
        try:
            user = self.validate_user(email, password)
        except UnauthorizedError:
            self._audit(
                SecurityEventType.LOGIN_BLOCKED_DISABLED, details={"email": normalize_email(email)}
            )
            self._db.commit()
            raise

        if user is None:
            self._audit(SecurityEventType.LOGIN_FAILED, details={"email": normalize_email(email)})
            self._db.commit()
            raise UnauthorizedError(INVALID_CREDENTIALS)
        return user

    def login(self, user: User) -> dict:
        """Start a session for an authenticated user.

        Raises:
            UnauthorizedError: If the user has not verified their email.
        """
        if not user.is_verified:
            self._audit(SecurityEventType.LOGIN_BLOCKED_UNVERIFIED, user_id=user.id)
            self._db.commit()
            raise UnauthorizedError("Please verify your email before logging in")

        tokens = TokenService.create_token_pair(user)
        self._users.update(
            user,
            refresh_token_hash=PasswordHasher.hash_token(tokens.refresh_token),
            last_login_at=_utcnow(),
        )
        self._audit(SecurityEventType.LOGIN_SUCCESS, user_id=user.id)
        self._db.commit()

        logger.info(f"User logged in: {user.email}")
        return {
            "success": True,
            "message": "Login successful",
            "data": {
                "access_token": tokens.access_token,
                "refresh_token": tokens.refresh_token,
                "token_type": "bearer",
                "user": sanitize_user(user),
            },
        }

    def refresh_tokens(self, refresh_token: str) -> dict:
        """Exchange a refresh token for a new pair, rotating the stored hash.

        Raises:
            UnauthorizedError: For any invalid, expired, superseded or revoked token.
        """
        payload = TokenService.decode_token(refresh_token, TokenService.REFRESH)
        if payload is None:
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)

        user = self._users.find_by_id(payload["sub"])
        if user is None or not user.refresh_token_hash or not user.is_active:
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)

        stored_hash = user.refresh_token_hash
        if not PasswordHasher.verify_token_hash(refresh_token, stored_hash):
            # Validly signed but superseded: replay of an old token
            self._audit(SecurityEventType.REFRESH_TOKEN_REUSE, user_id=user.id)
            self._db.commit()
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)

        tokens = TokenService.create_token_pair(user)
        rotated = self._users.swap_refresh_token_hash(
            user.id, stored_hash, PasswordHasher.hash_token(tokens.refresh_token)
        )
        if not rotated:
            # A concurrent refresh with the same token won
            self._db.rollback()
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)
        self._db.commit()

        return {
            "success": True,
            "message": "Tokens refreshed successfully",
            "data": {
                "access_token": tokens.access_token,
                "refresh_token": tokens.refresh_token,
                "token_type": "bearer",
            },
        }

    def logout(self, user_id: str) -> dict:
        """Revoke the stored refresh token. Idempotent."""
        if self._users.clear_refresh_token(user_id):
            self._audit(SecurityEventType.LOGOUT, user_id=user_id)
        self._db.commit()
        return {"success": True, "message": "Logged out successfully"}

    def change_password(self, user_id: str, current_password: str, new_password: str) -> dict:
        """Replace the password and end every session.

        Raises:
            NotFoundError: If the user does not exist.
            BadRequestError: If current_password is wrong.
        """
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")

        if not PasswordHasher.verify_password(current_password, user.password_hash):
            raise BadRequestError("Current password is incorrect")

        self._users.update(
            user,
            password_hash=PasswordHasher.hash_password(new_password),
            refresh_token_hash=None,  # Force re-login
        )
        self._audit(SecurityEventType.PASSWORD_CHANGED, user_id=user.id)
        self._db.commit()

        logger.info(f"Password changed for user: {user.email}")
        return {
            "success": True,
            "message": "Password changed successfully. Please log in again.",
        }

    def get_profile(self, user: User) -> dict:
        """Profile of the authenticated user."""
        return {
            "success": True,
            "message": "Profile retrieved successfully",
            "data": {"user": sanitize_user(user)},
        }

    # Helpers

    def _issue_verification_token(self, user: User) -> str:
        token = TokenService.generate_verification_token()
        expires_at = _utcnow() + timedelta(hours=settings.verification_token_expire_hours)
        self._verifications.create(user.id, token, expires_at)
        return token

    def _deliver(self, kind: str, send: Callable[..., bool], *args: object) -> bool:
        """Best-effort email send. Failures are logged, never raised."""
        try:
            return bool(send(*args))
        except Exception:
            logger.exception(f"Failed to send {kind} email")
            return False

    def _audit(
        self,
        event_type: SecurityEventType,
        user_id: str | None = None,
        details: dict | None = None,
    ) -> None:
        SecurityAuditService.log_event(
            self._db, event_type, user_id=user_id, context=self._context, details=details
        )
