"""Rate limits for the unauthenticated auth endpoints."""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Per client address
REGISTER_LIMIT = "5/minute"
LOGIN_LIMIT = "5/minute"
VERIFY_EMAIL_LIMIT = "10/minute"
RESEND_VERIFICATION_LIMIT = "3/minute"
REFRESH_LIMIT = "10/minute"
CHANGE_PASSWORD_LIMIT = "3/minute"

limiter = Limiter(key_func=get_remote_address)
