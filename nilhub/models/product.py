# nilhub/models/product.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


CATEGORIES: tuple[str, ...] = (
    "maquillaje",
    "skincare",
    "fragancias",
    "cuidado-personal",
    "accesorios",
    "otros",
)


class Product(SQLModel, table=True):
    """
    Catalog entry owned by a Store.

    Images are stored inline as a JSON list of {"url", "asset_id"} so the
    storage object can be removed later by its asset id.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    store_id: uuid.UUID = Field(
        foreign_key="stores.id",
        index=True,
        description="FK to stores.id",
    )

    name: str = Field(
        max_length=100,
        min_length=3,
        index=True,
        description="Display name of the product",
    )

    description: str | None = Field(default=None, max_length=1000)

    category: str = Field(
        index=True,
        description="One of CATEGORIES",
    )

    brand: str | None = Field(default=None, max_length=50)

    price: float = Field(ge=0, description="Regular price")

    sale_price: float | None = Field(
        default=None,
        ge=0,
        description="Optional sale price; must be lower than price",
    )

    stock: int = Field(default=0, ge=0)

    # Derived from stock, recomputed whenever stock changes
    in_stock: bool = Field(default=False)

    images: list[dict] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    ingredients: str | None = Field(default=None, max_length=500)
    weight: str | None = Field(default=None, max_length=50)

    is_active: bool = Field(
        default=True,
        index=True,
        description="Whether this product is visible on the storefront",
    )

    views: int = Field(default=0, ge=0)
    whatsapp_clicks: int = Field(default=0, ge=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    def set_stock(self, stock: int) -> None:
        self.stock = stock
        self.in_stock = stock > 0
