"""Password and token hashing."""

import hashlib
import hmac
import logging

import bcrypt

from paharnama.config import settings

logger = logging.getLogger(__name__)

# bcrypt only uses the first 72 bytes of its input
_BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """Slow salted hashing for passwords, SHA-256 for long random tokens."""

    # Checked against when the email is unknown so both paths cost one bcrypt round
    _DUMMY_HASH = "$2b$12$LQv3c1yqBWVHxkd0LHAkCOYz6TtxMQJqhN8/X4.VTtYA9dWQ6E3Ky"

    @staticmethod
    def get_dummy_hash() -> str:
        """Get a dummy password hash for timing-consistent verification."""
        return PasswordHasher._DUMMY_HASH

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using bcrypt."""
        salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8")[:_BCRYPT_MAX_BYTES], salt)
        return hashed.decode("utf-8")

    @staticmethod
    def verify_password(password: str, hashed: str) -> bool:
        """Verify a password against its hash."""
        try:
            return bcrypt.checkpw(
                password.encode("utf-8")[:_BCRYPT_MAX_BYTES], hashed.encode("utf-8")
            )
        except ValueError as e:
            logger.error(f"Password verification error: {e}")
            return False

    @staticmethod
    def hash_token(token: str) -> str:
        """Hash a token using SHA-256 (refresh tokens exceed bcrypt's 72-byte limit)."""
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    @staticmethod
    def verify_token_hash(token: str, hashed: str) -> bool:
        """Verify a token against its SHA-256 hash in constant time."""
        return hmac.compare_digest(PasswordHasher.hash_token(token), hashed)
