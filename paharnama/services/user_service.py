"""User administration for admins."""

import logging

from sqlalchemy.orm import Session

from paharnama.exceptions import ConflictError, NotFoundError
from paharnama.models.user import User
from paharnama.schemas.common import PaginatedResponse
from paharnama.schemas.user import UserCreate, UserDetail, UserQuery, UserUpdate
from paharnama.services.password_hasher import PasswordHasher
from paharnama.services.repositories import DuplicateError, UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """List, create, update and deactivate user accounts."""

    def __init__(self, db: Session) -> None:
        self._db = db
        self._users = UserRepository(db)

    def list_users(self, query: UserQuery) -> PaginatedResponse[UserDetail]:
        """Paginated, filtered user listing."""
        skip = (query.page - 1) * query.limit
        users, total = self._users.search(
            skip=skip,
            limit=query.limit,
            search=query.search,
            role=query.role,
            is_active=query.is_active,
            is_verified=query.is_verified,
        )
        return PaginatedResponse[UserDetail](
            items=[UserDetail.model_validate(u) for u in users],
            total=total,
            skip=skip,
            limit=query.limit,
            has_more=skip + len(users) < total,
        )

    def get_user(self, user_id: str) -> User:
        """Raises NotFoundError if missing."""
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def create_user(self, data: UserCreate) -> User:
        """Create an account directly, bypassing email verification if requested.

        Raises:
            ConflictError: If the email is already registered.
        """
        if self._users.find_by_email(data.email):
            raise ConflictError("User with this email already exists")
        try:
            user = self._users.create(
                email=data.email,
                password_hash=PasswordHasher.hash_password(data.password),
                first_name=data.first_name,
                last_name=data.last_name,
                phone=data.phone,
                role=data.role,
                is_verified=data.is_verified,
            )
        except DuplicateError as e:
            self._db.rollback()
            raise ConflictError("User with this email already exists") from e
        self._db.commit()
        logger.info(f"User created by admin: {user.email} (role={user.role.value})")
        return user

    def update_user(self, user_id: str, data: UserUpdate) -> User:
        """Partial update. Deactivating an account also ends its session."""
        user = self.get_user(user_id)
        update_data = data.model_dump(exclude_unset=True)
        # Non-nullable columns: an explicit null means "leave as is"
        for field in ("role", "is_active", "is_verified"):
            if update_data.get(field, False) is None:
                del update_data[field]
        if update_data.get("is_active") is False:
            update_data["refresh_token_hash"] = None
        self._users.update(user, **update_data)
        self._db.commit()
        return user

    def deactivate_user(self, user_id: str) -> User:
        """Block future logins and revoke the current session."""
        user = self.get_user(user_id)
        self._users.update(user, is_active=False, refresh_token_hash=None)
        self._db.commit()
        logger.info(f"User deactivated: {user.email}")
        return user
