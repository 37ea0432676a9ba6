# nilhub/repositories/password_reset_repo.py
from datetime import datetime

from sqlmodel import Session, col, select

from nilhub.models.password_reset import PasswordReset


class PasswordResetRepository:
    """
    Data access layer for password recovery codes.
    """

    def get_by_email_and_code(
        self,
        session: Session,
        email: str,
        code: str,
    ) -> PasswordReset | None:
        """Most recent code matching email + code."""
        stmt = (
            select(PasswordReset)
            .where(PasswordReset.email == email, PasswordReset.code == code)
            .order_by(col(PasswordReset.created_at).desc())
        )
        return session.exec(stmt).first()

    def get_recent_for_email(
        self,
        session: Session,
        email: str,
        since: datetime,
    ) -> PasswordReset | None:
        stmt = select(PasswordReset).where(
            PasswordReset.email == email,
            PasswordReset.created_at >= since,
        )
        return session.exec(stmt).first()

    def save(self, session: Session, reset: PasswordReset) -> PasswordReset:
        session.add(reset)
        session.commit()
        session.refresh(reset)
        return reset
