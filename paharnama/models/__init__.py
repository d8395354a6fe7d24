"""SQLAlchemy ORM models."""

from paharnama.models.email_verification import EmailVerification
from paharnama.models.mountain import Mountain, MountainTranslation
from paharnama.models.security_audit_log import SecurityAuditLog
from paharnama.models.user import Role, User

__all__ = [
    "EmailVerification",
    "Mountain",
    "MountainTranslation",
    "Role",
    "SecurityAuditLog",
    "User",
]
