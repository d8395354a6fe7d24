"""Repository layer - data access abstraction.

Repositories handle all database queries, providing a clean interface
for services. Services should use repositories for data access rather
than directly querying SQLAlchemy models.

Repositories never commit: the calling service owns the transaction.

Dependency direction: Services -> Repositories -> Models
"""

from .email_verification_repository import EmailVerificationRepository
from .exceptions import DuplicateError, RepositoryError
from .mountain_repository import MountainRepository
from .user_repository import UserRepository

__all__ = [
    "DuplicateError",
    "EmailVerificationRepository",
    "MountainRepository",
    "RepositoryError",
    "UserRepository",
]
