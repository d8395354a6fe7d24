"""Tests for email verification flow."""

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from paharnama.config import settings
from paharnama.models.email_verification import EmailVerification
from paharnama.models.user import User
from paharnama.services.email_service import EmailDeliveryError
from paharnama.services.password_hasher import PasswordHasher
from tests.conftest import SEND_VERIFICATION, SEND_WELCOME, register_user


class TestRegistrationEmailVerification:
    """Tests for registration with email verification."""

    @patch(SEND_VERIFICATION)
    def test_register_sends_verification_email(self, mock_send, auth_client):
        """Registration should send verification email."""
        test_client, _ = auth_client
        mock_send.return_value = True

        response = test_client.post(
            "/api/auth/register",
            json={"email": "test@example.com", "password": "Secure123", "first_name": "Ama"},
        )
        assert response.status_code == 201
        mock_send.assert_called_once()
        call_args = mock_send.call_args[0]
        assert call_args[0] == "test@example.com"
        assert call_args[1] == "Ama"
        assert call_args[2]

    def test_register_stores_only_token_hash(self, auth_client):
        """The raw token never reaches the database."""
        test_client, db_session_maker = auth_client
        _, token = register_user(test_client, "test@example.com", "Secure123")

        db = db_session_maker()
        verification = db.query(EmailVerification).one()
        assert verification.token_hash != token
        assert verification.token_hash == PasswordHasher.hash_token(token)
        assert verification.used_at is None
        db.close()

    def test_register_creates_unverified_user(self, auth_client):
        """Registration should create user with is_verified=False."""
        test_client, db_session_maker = auth_client
        register_user(test_client, "test@example.com", "Secure123")

        db = db_session_maker()
        user = db.query(User).filter(User.email == "test@example.com").first()
        assert user is not None
        assert user.is_verified is False
        db.close()

    @patch(SEND_VERIFICATION)
    def test_register_succeeds_when_email_fails(self, mock_send, auth_client):
        """Mail provider failure does not fail registration."""
        test_client, db_session_maker = auth_client
        mock_send.side_effect = EmailDeliveryError("provider down")

        response = test_client.post(
            "/api/auth/register",
            json={"email": "test@example.com", "password": "Secure123"},
        )
        assert response.status_code == 201

        db = db_session_maker()
        assert db.query(User).count() == 1
        assert db.query(EmailVerification).count() == 1
        db.close()

    @patch("paharnama.services.email_service.Mail", side_effect=ValueError("bad address"))
    def test_register_succeeds_when_message_cannot_be_built(
        self, _mock_mail, auth_client, monkeypatch
    ):
        """Errors while building the message do not fail registration."""
        monkeypatch.setattr(settings, "sendgrid_api_key", "SG.test-key")
        test_client, db_session_maker = auth_client

        response = test_client.post(
            "/api/auth/register",
            json={"email": "test@example.com", "password": "Secure123"},
        )
        assert response.status_code == 201

        db = db_session_maker()
        assert db.query(User).count() == 1
        db.close()

    @patch(SEND_VERIFICATION)
    def test_resend_succeeds_on_unexpected_send_error(self, mock_send, auth_client):
        test_client, _ = auth_client
        register_user(test_client, "test@example.com", "Secure123")
        mock_send.side_effect = RuntimeError("unexpected")

        response = test_client.post(
            "/api/auth/resend-verification", json={"email": "test@example.com"}
        )

        assert response.status_code == 200

class TestLoginEmailVerification:
    """Tests for login with email verification check."""

    def test_login_blocked_if_not_verified(self, auth_client):
        """Login should fail if email not verified."""
        test_client, _ = auth_client
        register_user(test_client, "unverified@example.com", "Secure123")

        response = test_client.post(
            "/api/auth/login",
            json={"email": "unverified@example.com", "password": "Secure123"},
        )
        assert response.status_code == 401
        assert "verify your email" in response.json()["message"]

    def test_login_succeeds_after_verification(self, auth_client):
        test_client, _ = auth_client
        _, token = register_user(test_client, "test@example.com", "Secure123")

        with patch(SEND_WELCOME):
            response = test_client.post("/api/auth/verify-email", json={"token": token})
        assert response.status_code == 200

        response = test_client.post(
            "/api/auth/login",
            json={"email": "test@example.com", "password": "Secure123"},
        )
        assert response.status_code == 200


class TestVerifyEmail:
    """Tests for the verify-email endpoint."""

    @patch(SEND_WELCOME)
    def test_verify_email_success(self, mock_welcome, auth_client):
        test_client, db_session_maker = auth_client
        _, token = register_user(test_client, "test@example.com", "Secure123")

        response = test_client.post("/api/auth/verify-email", json={"token": token})

        assert response.status_code == 200
        assert response.json()["success"] is True
        mock_welcome.assert_called_once()
        assert mock_welcome.call_args[0][0] == "test@example.com"

        db = db_session_maker()
        user = db.query(User).filter(User.email == "test@example.com").first()
        assert user.is_verified is True
        assert db.query(EmailVerification).one().used_at is not None
        db.close()

    def test_verify_email_invalid_token(self, auth_client):
        test_client, _ = auth_client

        response = test_client.post("/api/auth/verify-email", json={"token": "invalid"})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid verification token"

    @patch(SEND_WELCOME)
    def test_verify_email_token_is_single_use(self, mock_welcome, auth_client):
        test_client, _ = auth_client
        _, token = register_user(test_client, "test@example.com", "Secure123")

        first = test_client.post("/api/auth/verify-email", json={"token": token})
        second = test_client.post("/api/auth/verify-email", json={"token": token})

        assert first.status_code == 200
        assert second.status_code == 400
        assert "already been used" in second.json()["message"]
        mock_welcome.assert_called_once()

    def test_verify_email_expired_token(self, auth_client):
        test_client, db_session_maker = auth_client
        _, token = register_user(test_client, "test@example.com", "Secure123")

        db = db_session_maker()
        verification = db.query(EmailVerification).one()
        verification.expires_at = datetime.now(UTC) - timedelta(minutes=1)
        db.commit()
        db.close()

        response = test_client.post("/api/auth/verify-email", json={"token": token})

        assert response.status_code == 400
        assert "expired" in response.json()["message"]

        db = db_session_maker()
        assert db.query(User).one().is_verified is False
        db.close()

    @patch(SEND_WELCOME)
    def test_verify_succeeds_when_welcome_email_fails(self, mock_welcome, auth_client):
        test_client, db_session_maker = auth_client
        mock_welcome.side_effect = EmailDeliveryError("provider down")
        _, token = register_user(test_client, "test@example.com", "Secure123")

        response = test_client.post("/api/auth/verify-email", json={"token": token})

        assert response.status_code == 200
        db = db_session_maker()
        assert db.query(User).one().is_verified is True
        db.close()


class TestResendVerification:
    """Tests for resend verification endpoint."""

    @patch(SEND_VERIFICATION)
    def test_resend_verification_unknown_email(self, mock_send, auth_client):
        """Resend should return the generic message for unknown email (no enumeration)."""
        test_client, db_session_maker = auth_client

        response = test_client.post(
            "/api/auth/resend-verification",
            json={"email": "nonexistent@example.com"},
        )
        assert response.status_code == 200
        assert "If an account" in response.json()["message"]
        mock_send.assert_not_called()

        db = db_session_maker()
        assert db.query(EmailVerification).count() == 0
        db.close()

    def test_resend_invalidates_previous_token(self, auth_client):
        test_client, _ = auth_client
        _, old_token = register_user(test_client, "test@example.com", "Secure123")

        with patch(SEND_VERIFICATION) as mock_send:
            response = test_client.post(
                "/api/auth/resend-verification",
                json={"email": "test@example.com"},
            )
        assert response.status_code == 200
        assert "If an account" in response.json()["message"]
        new_token = mock_send.call_args[0][2]
        assert new_token != old_token

        with patch(SEND_WELCOME):
            old = test_client.post("/api/auth/verify-email", json={"token": old_token})
            new = test_client.post("/api/auth/verify-email", json={"token": new_token})

        assert old.status_code == 400
        assert new.status_code == 200

    def test_resend_for_verified_user(self, auth_client):
        test_client, _ = auth_client
        _, token = register_user(test_client, "test@example.com", "Secure123")
        with patch(SEND_WELCOME):
            test_client.post("/api/auth/verify-email", json={"token": token})

        with patch(SEND_VERIFICATION) as mock_send:
            response = test_client.post(
                "/api/auth/resend-verification",
                json={"email": "test@example.com"},
            )
        assert response.status_code == 400
        assert response.json()["message"] == "This email is already verified"
        mock_send.assert_not_called()

    def test_verifying_consumes_all_outstanding_tokens(self, auth_client):
        """After verification no token of the user remains usable."""
        test_client, db_session_maker = auth_client
        _, first_token = register_user(test_client, "test@example.com", "Secure123")

        # Insert a second outstanding token directly
        from paharnama.services.repositories import EmailVerificationRepository

        db = db_session_maker()
        user = db.query(User).one()
        EmailVerificationRepository(db).create(
            user.id, "second-token", datetime.now(UTC) + timedelta(hours=1)
        )
        db.commit()
        db.close()

        with patch(SEND_WELCOME):
            assert (
                test_client.post("/api/auth/verify-email", json={"token": first_token}).status_code
                == 200
            )
            response = test_client.post("/api/auth/verify-email", json={"token": "second-token"})
        assert response.status_code == 400
        assert "already been used" in response.json()["message"]
