# nilhub/models/store.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


DEFAULT_THEME_COLOR = "#EC4899"


class Store(SQLModel, table=True):
    """
    A vendor's virtual storefront, reachable at /<slug>.

    `product_count` is denormalized and maintained by the product service
    on create/delete.
    """

    __tablename__ = "stores"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    owner_id: uuid.UUID = Field(
        foreign_key="accounts.id",
        index=True,
        description="FK to accounts.id",
    )

    name: str = Field(max_length=50, min_length=3)

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )

    description: str | None = Field(default=None, max_length=500)

    whatsapp: str = Field(description="WhatsApp number, 8-15 digits")
    instagram: str | None = Field(default=None)
    facebook: str | None = Field(default=None)

    logo_url: str | None = Field(default=None)
    logo_asset_id: str | None = Field(default=None)
    banner_url: str | None = Field(default=None)
    banner_asset_id: str | None = Field(default=None)

    theme_color: str = Field(default=DEFAULT_THEME_COLOR)

    is_active: bool = Field(default=True, index=True)

    product_count: int = Field(default=0, ge=0)
    visit_count: int = Field(default=0, ge=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
