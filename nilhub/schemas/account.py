# nilhub/schemas/account.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from nilhub.schemas.store import StoreRead, StoreSummary, clean_whatsapp

Role = Literal["user", "admin"]


def normalize_email(email: str) -> str:
    """Emails are compared lowercase and trimmed everywhere."""
    return email.strip().lower() if email else ""


class AccountRead(SQLModel):
    """Public account representation (never includes the password hash)."""

    id: uuid.UUID
    name: str
    email: str
    phone: str | None = None
    role: Role
    is_active: bool
    created_at: datetime
    updated_at: datetime


class AccountSummary(SQLModel):
    id: uuid.UUID
    name: str
    email: str
    role: Role


class RegisterRequest(SQLModel):
    """
    Payload for vendor sign-up. Creates the account and its store.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=50)
    email: EmailStr
    password: str = Field(min_length=6)
    store_name: str = Field(max_length=50)
    whatsapp: str
    instagram: str | None = None
    facebook: str | None = None

    @field_validator("name", "store_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("whatsapp")
    @classmethod
    def valid_whatsapp(cls, v: str) -> str:
        return clean_whatsapp(v)


class LoginRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)


class AuthData(SQLModel):
    account: AccountSummary
    store: StoreSummary | None
    token: str


class MeData(SQLModel):
    account: AccountRead
    store: StoreRead | None
