# nilhub/schemas/product.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

Category = Literal[
    "maquillaje",
    "skincare",
    "fragancias",
    "cuidado-personal",
    "accesorios",
    "otros",
]


class ProductImage(SQLModel):
    """
    Image reference as stored on the product.

    `asset_id` is the storage object key used to delete the file later.
    """

    model_config = ConfigDict(extra="ignore")

    url: str
    asset_id: str

    @field_validator("url", "asset_id")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("image url and asset_id cannot be empty")
        return v


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    store_id: uuid.UUID
    name: str
    description: str | None = None
    category: Category
    brand: str | None = None
    price: float
    sale_price: float | None = None
    stock: int
    in_stock: bool
    images: list[ProductImage]
    ingredients: str | None = None
    weight: str | None = None
    is_active: bool
    views: int
    whatsapp_clicks: int
    created_at: datetime
    updated_at: datetime


class ProductCreate(SQLModel):
    """
    Payload for creating a product.

    - at least one image is required (upload first, then reference it)
    - sale_price, if given, must be lower than price (checked in the service)
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    category: Category
    brand: str | None = Field(default=None, max_length=50)
    price: float = Field(ge=0)
    sale_price: float | None = Field(default=None, ge=0)
    stock: int = Field(default=0, ge=0)
    images: list[ProductImage] = Field(min_length=1)
    ingredients: str | None = Field(default=None, max_length=500)
    weight: str | None = Field(default=None, max_length=50)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("name must be at least 3 characters")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def lowercase_category(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.

    All fields are optional. Omitted fields are left untouched; an explicit
    null clears the nullable ones (sale_price, description, brand, ...)
    and is rejected for the rest.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    category: Category | None = None
    brand: str | None = Field(default=None, max_length=50)
    price: float | None = Field(default=None, ge=0)
    sale_price: float | None = Field(default=None, ge=0)
    stock: int | None = Field(default=None, ge=0)
    images: list[ProductImage] | None = None
    ingredients: str | None = Field(default=None, max_length=500)
    weight: str | None = Field(default=None, max_length=50)
    is_active: bool | None = None

    @field_validator("name", "category", "price", "stock", "images", "is_active", mode="before")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if len(v) < 3:
            raise ValueError("name must be at least 3 characters")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def lowercase_category(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class StockUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    stock: int = Field(ge=0)


class WhatsAppClick(SQLModel):
    whatsapp_clicks: int
