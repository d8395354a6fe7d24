"""Recording of security events (registration, logins, token misuse)."""

import enum
import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Request
from sqlalchemy.orm import Session

from paharnama.config import settings
from paharnama.models.security_audit_log import SecurityAuditLog

logger = logging.getLogger(__name__)

_USER_AGENT_MAX = 500


class SecurityEventType(str, enum.Enum):
    """Audited event kinds."""

    USER_REGISTERED = "user_registered"
    EMAIL_VERIFIED = "email_verified"
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGIN_BLOCKED_UNVERIFIED = "login_blocked_unverified"
    LOGIN_BLOCKED_DISABLED = "login_blocked_disabled"
    LOGOUT = "logout"
    PASSWORD_CHANGED = "password_changed"
    REFRESH_TOKEN_REUSE = "refresh_token_reuse"


@dataclass(frozen=True)
class RequestContext:
    """Client details attached to audit rows."""

    ip_address: str | None = None
    user_agent: str | None = None

    @classmethod
    def from_request(cls, request: Request) -> "RequestContext":
        """Client address and user agent.

        X-Forwarded-For is client-controlled, so its first hop is used only
        when ``settings.trust_forwarded_for`` says a proxy sets it.
        """
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for and settings.trust_forwarded_for:
            ip_address = forwarded_for.split(",")[0].strip()
        else:
            ip_address = request.client.host if request.client else None

        user_agent = request.headers.get("User-Agent")
        return cls(
            ip_address=ip_address,
            user_agent=user_agent[:_USER_AGENT_MAX] if user_agent else None,
        )


class SecurityAuditService:
    """Adds audit rows to the caller's transaction."""

    @staticmethod
    def log_event(
        db: Session,
        event_type: SecurityEventType,
        user_id: str | None = None,
        context: RequestContext | None = None,
        details: dict[str, Any] | None = None,
    ) -> SecurityAuditLog:
        """Stage an audit row. The caller commits it with its own changes."""
        context = context or RequestContext()
        entry = SecurityAuditLog(
            user_id=user_id,
            event_type=SecurityEventType(event_type).value,
            ip_address=context.ip_address,
            user_agent=context.user_agent,
            details=details or None,
        )
        db.add(entry)

        logger.info(
            f"Security event: {entry.event_type} | user_id={user_id} | ip={context.ip_address}"
        )
        return entry
