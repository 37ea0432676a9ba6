# nilhub/services/password_reset_service.py
import logging
import secrets
import smtplib
from datetime import datetime, timedelta, timezone

from sqlmodel import Session

from nilhub.core.email_client import send_email
from nilhub.core.errors import NotFound, TooManyRequests, ValidationFailed
from nilhub.core.security import hash_password
from nilhub.models.password_reset import MAX_RESET_ATTEMPTS, PasswordReset
from nilhub.repositories.account_repo import AccountRepository
from nilhub.repositories.password_reset_repo import PasswordResetRepository
from nilhub.schemas.account import normalize_email
from nilhub.schemas.password_reset import (
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    ResetPasswordRequest,
    VerifyResetCodeRequest,
)

logger = logging.getLogger(__name__)

RESEND_WINDOW = timedelta(minutes=5)

# Same answer whether or not the email exists
GENERIC_FORGOT_MESSAGE = "If the email exists, you will receive a recovery code"


def generate_code() -> str:
    """Random 6-digit code (100000-999999)."""
    return str(100000 + secrets.randbelow(900000))


class PasswordResetService:
    """
    Password recovery with 6-digit one-time codes.

    Flow:
      1. forgot-password: create a code (1 per 5 minutes per email) and deliver it.
      2. verify-reset-code: check the code; each check consumes an attempt.
      3. reset-password: set the new password and burn the code.
    """

    def __init__(self, repo: PasswordResetRepository, account_repo: AccountRepository):
        self.repo = repo
        self.account_repo = account_repo

    # ----- Delivery -----

    @staticmethod
    def _send_code_email(email: str, name: str, code: str) -> None:
        text = (
            f"Hi {name},\n\n"
            f"Your NilHub password recovery code is: {code}\n\n"
            "The code expires in 1 hour. If you did not request it, ignore this email.\n"
        )
        html = (
            f"<p>Hi {name},</p>"
            f"<p>Your NilHub password recovery code is:</p>"
            f"<h2 style=\"letter-spacing:4px\">{code}</h2>"
            "<p>The code expires in 1 hour. If you did not request it, ignore this email.</p>"
        )
        send_email(email, "Your NilHub recovery code", text, html)

    @staticmethod
    def _send_confirmation_email(email: str, name: str) -> None:
        text = (
            f"Hi {name},\n\n"
            "Your NilHub password was changed. If this was not you, contact support.\n"
        )
        send_email(email, "Your NilHub password was changed", text)

    # ----- Operations -----

    def request_code(
        self,
        session: Session,
        payload: ForgotPasswordRequest,
        expose_code: bool = False,
    ) -> ForgotPasswordResponse:
        """
        Raises:
            TooManyRequests(429): a code was requested less than 5 minutes ago.
        """
        email = normalize_email(payload.email)
        account = self.account_repo.get_by_email(session, email)
        if account is None:
            logger.info("Password recovery requested for unknown email: %s", email)
            return ForgotPasswordResponse(message=GENERIC_FORGOT_MESSAGE)

        since = datetime.now(timezone.utc) - RESEND_WINDOW
        if self.repo.get_recent_for_email(session, email, since) is not None:
            raise TooManyRequests(
                "You already requested a code recently. Wait 5 minutes."
            )

        code = generate_code()
        reset = self.repo.save(
            session,
            PasswordReset(
                account_id=account.id,
                email=account.email,
                code=code,
                method=payload.method,
            ),
        )
        logger.info("Recovery code created for %s (method=%s)", account.email, reset.method)

        if payload.method == "email":
            try:
                self._send_code_email(account.email, account.name, code)
            except (RuntimeError, smtplib.SMTPException, OSError) as e:
                # The code is stored; the client can still request support
                logger.error("Could not send recovery email to %s: %s", account.email, e)
            message = f"Code sent to {account.email}. Check your inbox."
        else:
            # No WhatsApp provider yet: the code only reaches the server log
            logger.info("WhatsApp recovery code for %s: %s", account.email, code)
            message = "Code generated. Check the server console."

        return ForgotPasswordResponse(
            message=message,
            code=code if expose_code else None,
        )

    def verify_code(self, session: Session, payload: VerifyResetCodeRequest) -> str:
        """
        Raises:
            ValidationFailed(400): unknown, used, exhausted or expired code.
        """
        email = normalize_email(payload.email)
        reset = self.repo.get_by_email_and_code(session, email, payload.code)
        if reset is None:
            raise ValidationFailed("Invalid code")

        if not reset.is_valid():
            if reset.used:
                raise ValidationFailed("This code has already been used")
            if reset.attempts >= MAX_RESET_ATTEMPTS:
                raise ValidationFailed("You have exceeded the maximum number of attempts")
            if reset.is_expired():
                raise ValidationFailed("The code has expired")
            raise ValidationFailed("Invalid or expired code")

        reset.attempts += 1
        self.repo.save(session, reset)
        return "Valid code"

    def reset_password(self, session: Session, payload: ResetPasswordRequest) -> str:
        """
        Raises:
            ValidationFailed(400): code not usable.
            NotFound(404): the account behind the code is gone.
        """
        email = normalize_email(payload.email)
        reset = self.repo.get_by_email_and_code(session, email, payload.code)
        if reset is None or not reset.is_valid():
            raise ValidationFailed("Invalid or expired code")

        account = self.account_repo.get_by_id(session, reset.account_id)
        if account is None:
            raise NotFound("Account not found")

        account.password_hash = hash_password(payload.new_password)
        account.updated_at = datetime.now(timezone.utc)
        self.account_repo.update(session, account)

        reset.used = True
        self.repo.save(session, reset)
        logger.info("Password updated for %s", account.email)

        try:
            self._send_confirmation_email(account.email, account.name)
        except (RuntimeError, smtplib.SMTPException, OSError) as e:
            logger.warning("Could not send password change confirmation: %s", e)

        return "Password updated successfully"
