"""Email service using SendGrid."""

import logging
from html import escape

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from paharnama.config import settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """An email could not be handed to the mail provider."""


class EmailService:
    """Service for sending transactional emails via SendGrid.

    Send methods return True when the message was accepted, False when
    email is not configured, and raise EmailDeliveryError on failure.
    """

    @staticmethod
    def _send_email(to_email: str, subject: str, html_content: str) -> bool:
        """Send email via SendGrid."""
        if not settings.sendgrid_api_key:
            logger.warning("SendGrid API key not configured, skipping email send")
            return False

        try:
            message = Mail(
                from_email=(settings.email_from_address, settings.email_from_name),
                to_emails=to_email,
                subject=subject,
                html_content=html_content,
            )
            sg = SendGridAPIClient(settings.sendgrid_api_key)
            response = sg.send(message)
        except Exception as e:
            raise EmailDeliveryError(f"Failed to send email to {to_email}") from e

        if response.status_code not in (200, 201, 202):
            raise EmailDeliveryError(
                f"Mail provider rejected email to {to_email}: status {response.status_code}"
            )
        logger.info(f"Email sent to {to_email}, status: {response.status_code}")
        return True

    @staticmethod
    def _greeting_name(first_name: str | None) -> str:
        return escape(first_name) if first_name else "there"

    @classmethod
    def send_verification_email(cls, email: str, first_name: str | None, token: str) -> bool:
        """Send email verification link."""
        verify_url = f"{settings.frontend_url}/verify-email?token={token}"
        html = f"""
        <h2>Hi {cls._greeting_name(first_name)}, welcome to Paharnama!</h2>
        <p>Click the link below to verify your email address:</p>
        <p><a href="{verify_url}">{verify_url}</a></p>
        <p>This link expires in {settings.verification_token_expire_hours} hours.</p>
        <p>If you didn't create an account, you can ignore this email.</p>
        """
        return cls._send_email(email, "Welcome to Paharnama! Please verify your email", html)

    @classmethod
    def send_welcome_email(cls, email: str, first_name: str | None) -> bool:
        """Send welcome email after verification."""
        login_url = f"{settings.frontend_url}/login"
        html = f"""
        <h2>Welcome to Paharnama, {cls._greeting_name(first_name)}!</h2>
        <p>Your email has been verified. You can now log in to your account.</p>
        <p><a href="{login_url}">Log in to Paharnama</a></p>
        """
        return cls._send_email(email, "Welcome to Paharnama!", html)
