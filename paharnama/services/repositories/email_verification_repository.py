"""Email verification token data access layer."""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from paharnama.models import EmailVerification
from paharnama.services.password_hasher import PasswordHasher

logger = logging.getLogger(__name__)


class EmailVerificationRepository:
    """Ledger of one-time email verification tokens.

    Only the SHA-256 of a token is stored; lookups hash the presented token.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def create(self, user_id: str, token: str, expires_at: datetime) -> EmailVerification:
        """Record a newly issued token."""
        verification = EmailVerification(
            user_id=user_id,
            token_hash=PasswordHasher.hash_token(token),
            expires_at=expires_at,
        )
        self._db.add(verification)
        self._db.flush()
        return verification

    def find_by_token(self, token: str) -> EmailVerification | None:
        """Find a token record regardless of its used/expired state."""
        return (
            self._db.query(EmailVerification)
            .filter(EmailVerification.token_hash == PasswordHasher.hash_token(token))
            .first()
        )

    def mark_used(self, verification_id: str, used_at: datetime) -> bool:
        """Consume a token. False if it was already consumed."""
        updated = (
            self._db.query(EmailVerification)
            .filter(
                EmailVerification.id == verification_id,
                EmailVerification.used_at.is_(None),
            )
            .update({EmailVerification.used_at: used_at})
        )
        return updated == 1

    def invalidate_unused_for_user(self, user_id: str, used_at: datetime) -> int:
        """Mark every unused token of a user as used. Returns the count."""
        count = (
            self._db.query(EmailVerification)
            .filter(
                EmailVerification.user_id == user_id,
                EmailVerification.used_at.is_(None),
            )
            .update({EmailVerification.used_at: used_at})
        )
        if count:
            logger.debug(f"Invalidated {count} verification token(s) for user {user_id}")
        return count
