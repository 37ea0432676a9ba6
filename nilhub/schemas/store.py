# nilhub/schemas/store.py
import re
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

WHATSAPP_PATTERN = re.compile(r"^[0-9]{8,15}$")
HEX_COLOR_PATTERN = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")


def clean_store_name(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if len(v) < 3:
        raise ValueError("store name must be at least 3 characters")
    return v


def clean_whatsapp(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not WHATSAPP_PATTERN.match(v):
        raise ValueError("enter a valid WhatsApp number (digits only, 8-15)")
    return v


class StoreSummary(SQLModel):
    id: uuid.UUID
    name: str
    slug: str


class StoreRead(SQLModel):
    """
    Store representation for clients (public storefront and dashboard).
    """

    id: uuid.UUID
    owner_id: uuid.UUID
    name: str
    slug: str
    description: str | None = None
    whatsapp: str
    instagram: str | None = None
    facebook: str | None = None
    logo_url: str | None = None
    logo_asset_id: str | None = None
    banner_url: str | None = None
    banner_asset_id: str | None = None
    theme_color: str
    is_active: bool
    product_count: int
    visit_count: int
    created_at: datetime
    updated_at: datetime


class StoreCreate(SQLModel):
    """
    Payload for creating a store when the account has none yet.
    The slug is always generated from the name.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=50)
    description: str | None = Field(default=None, max_length=500)
    whatsapp: str
    instagram: str | None = None
    facebook: str | None = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return clean_store_name(v)

    @field_validator("whatsapp")
    @classmethod
    def valid_whatsapp(cls, v: str) -> str:
        return clean_whatsapp(v)


class StoreUpdate(SQLModel):
    """
    Partial update. Only branding and contact fields are editable;
    unknown keys are ignored, the slug and counters never change here.
    An explicit null clears optional fields (logo, banner, socials).
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, max_length=50)
    description: str | None = Field(default=None, max_length=500)
    whatsapp: str | None = None
    instagram: str | None = None
    facebook: str | None = None
    logo_url: str | None = None
    logo_asset_id: str | None = None
    banner_url: str | None = None
    banner_asset_id: str | None = None
    theme_color: str | None = None

    @field_validator("name", "whatsapp", "theme_color", mode="before")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        return clean_store_name(v)

    @field_validator("whatsapp")
    @classmethod
    def valid_whatsapp(cls, v: str | None) -> str | None:
        return clean_whatsapp(v)

    @field_validator("theme_color")
    @classmethod
    def valid_color(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not HEX_COLOR_PATTERN.match(v):
            raise ValueError("enter a valid hex color")
        return v
