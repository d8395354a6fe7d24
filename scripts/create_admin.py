"""Create or promote the initial administrator account."""

import logging
import os
import secrets

from sqlalchemy.orm import Session as DBSession

from paharnama.models.user import Role, User
from paharnama.services.password_hasher import PasswordHasher
from paharnama.services.repositories import UserRepository

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@paharnama.com"


def generate_secure_password() -> str:
    """Generate a cryptographically secure password."""
    return secrets.token_urlsafe(24)


def create_admin(
    db: DBSession, email: str = DEFAULT_ADMIN_EMAIL, password: str | None = None
) -> tuple[User, str | None]:
    """
    Create the admin account, or promote an existing account to admin.

    Args:
        db: Database session
        email: Admin email address
        password: Optional password. A new account gets a generated one if omitted.

    Returns:
        Tuple of (User, password set by this call or None if unchanged)
    """
    users = UserRepository(db)
    existing_user = users.find_by_email(email)

    if existing_user:
        fields = {"role": Role.ADMIN, "is_verified": True, "is_active": True}
        if password:
            fields["password_hash"] = PasswordHasher.hash_password(password)
            fields["refresh_token_hash"] = None
        users.update(existing_user, **fields)
        db.commit()
        logger.info("Existing account promoted to admin: %s", existing_user.id)
        return existing_user, password

    password = password or generate_secure_password()
    user = users.create(
        email=email,
        password_hash=PasswordHasher.hash_password(password),
        role=Role.ADMIN,
        is_verified=True,
    )
    db.commit()

    logger.info("Created admin account: %s (id: %s)", user.email, user.id)
    return user, password


if __name__ == "__main__":
    """Run as standalone script."""
    import sys

    from paharnama.config import settings
    from paharnama.database import Database

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    database = Database(settings.database_url)
    database.open()
    db = database.session()
    try:
        email = sys.argv[1] if len(sys.argv) > 1 else os.getenv("ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL)
        password = sys.argv[2] if len(sys.argv) > 2 else os.getenv("ADMIN_PASSWORD")
        user, password_used = create_admin(db, email, password)

        logger.info("")
        logger.info("Admin account ready:")
        logger.info("  Email: %s", user.email)
        logger.info("  ID: %s", user.id)
        if password_used:
            logger.info("  Password: %s", password_used)
            logger.info("  IMPORTANT: Save this password securely!")
    finally:
        db.close()
        database.close()
