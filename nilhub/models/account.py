# nilhub/models/account.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Account(SQLModel, table=True):
    """
    Vendor or administrator identity.

    Role:
      - "user" | "admin"

    Accounts are never hard-deleted; administrators flip `is_active`
    instead, which takes effect on the very next authenticated request.
    """

    __tablename__ = "accounts"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=50,
        min_length=2,
        description="Display name",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Login email, stored lowercase and trimmed",
    )

    # Never serialized; read models exclude it.
    password_hash: str = Field(description="bcrypt hash")

    phone: str | None = Field(default=None)

    role: str = Field(
        default="user",
        index=True,
        description="Application role: user | admin",
    )

    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last update timestamp (UTC)",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
