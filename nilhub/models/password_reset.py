# nilhub/models/password_reset.py
import uuid
from datetime import datetime, timedelta, timezone

from sqlmodel import SQLModel, Field


RESET_CODE_TTL = timedelta(hours=1)
MAX_RESET_ATTEMPTS = 3


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PasswordReset(SQLModel, table=True):
    """
    One-time 6-digit recovery code.

    A code is usable only while it is unused, has fewer than
    MAX_RESET_ATTEMPTS verification attempts, and has not expired.
    """

    __tablename__ = "password_resets"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    account_id: uuid.UUID = Field(foreign_key="accounts.id", index=True)

    email: str = Field(index=True)

    code: str = Field(min_length=6, max_length=6)

    # email | whatsapp
    method: str = Field()

    expires_at: datetime = Field(
        default_factory=lambda: _utcnow() + RESET_CODE_TTL,
        index=True,
    )

    attempts: int = Field(default=0, ge=0)

    used: bool = Field(default=False, index=True)

    created_at: datetime = Field(default_factory=_utcnow, index=True)

    def is_expired(self, now: datetime | None = None) -> bool:
        return _as_utc(self.expires_at) <= (now or _utcnow())

    def is_valid(self, now: datetime | None = None) -> bool:
        return (
            not self.used
            and self.attempts < MAX_RESET_ATTEMPTS
            and not self.is_expired(now)
        )
