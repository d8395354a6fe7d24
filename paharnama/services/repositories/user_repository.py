"""User data access layer."""

import logging
from typing import Any

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from paharnama.models import Role, User

from .exceptions import DuplicateError

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Emails are stored and compared lower-cased."""
    return email.strip().lower()


class UserRepository:
    """Centralized user data access.

    Naming conventions:
    - find_* : Query that may return None
    - create / update : Write, flushed but not committed
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_id(self, user_id: str) -> User | None:
        """Find user by primary key."""
        return self._db.query(User).filter(User.id == user_id).first()

    def find_by_email(self, email: str) -> User | None:
        """Find user by email (normalized to lower case)."""
        return self._db.query(User).filter(User.email == normalize_email(email)).first()

    def create(
        self,
        *,
        email: str,
        password_hash: str,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
        role: Role = Role.USER,
        is_verified: bool = False,
    ) -> User:
        """Insert a new user.

        Raises:
            DuplicateError: If the normalized email is already taken.
        """
        email = normalize_email(email)
        user = User(
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            role=role,
            is_verified=is_verified,
            is_active=True,
        )
        self._db.add(user)
        try:
            self._db.flush()
        except IntegrityError as e:
            raise DuplicateError("User", "email", email) from e
        return user

    def update(self, user: User, **fields: Any) -> User:
        """Set the given attributes on a user and flush."""
        for field, value in fields.items():
            setattr(user, field, value)
        self._db.flush()
        return user

    def clear_refresh_token(self, user_id: str) -> int:
        """Drop the stored refresh token hash. Returns the number of users matched."""
        return (
            self._db.query(User)
            .filter(User.id == user_id)
            .update({User.refresh_token_hash: None})
        )

    def swap_refresh_token_hash(self, user_id: str, expected_hash: str, new_hash: str) -> bool:
        """Replace the refresh token hash only if it still equals expected_hash.

        A single conditional UPDATE, so of two callers presenting the same
        refresh token only one sees a matched row.
        """
        updated = (
            self._db.query(User)
            .filter(User.id == user_id, User.refresh_token_hash == expected_hash)
            .update({User.refresh_token_hash: new_hash})
        )
        return updated == 1

    def search(
        self,
        *,
        skip: int = 0,
        limit: int = 10,
        search: str | None = None,
        role: Role | None = None,
        is_active: bool | None = None,
        is_verified: bool | None = None,
    ) -> tuple[list[User], int]:
        """Filtered, paginated listing. Returns (page, total)."""
        query = self._db.query(User)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    User.email.ilike(pattern),
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                )
            )
        if role is not None:
            query = query.filter(User.role == role)
        if is_active is not None:
            query = query.filter(User.is_active.is_(is_active))
        if is_verified is not None:
            query = query.filter(User.is_verified.is_(is_verified))

        total = query.count()
        users = query.order_by(User.created_at.desc(), User.email).offset(skip).limit(limit).all()
        return users, total
