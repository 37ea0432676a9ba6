# nilhub/schemas/password_reset.py
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

ResetMethod = Literal["email", "whatsapp"]


def _six_digits(v: str) -> str:
    v = v.strip()
    if len(v) != 6 or not v.isdigit():
        raise ValueError("code must have 6 digits")
    return v


class ForgotPasswordRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    method: ResetMethod = "email"


class VerifyResetCodeRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    code: str

    @field_validator("code")
    @classmethod
    def valid_code(cls, v: str) -> str:
        return _six_digits(v)


class ResetPasswordRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    code: str
    new_password: str = Field(min_length=6)

    @field_validator("code")
    @classmethod
    def valid_code(cls, v: str) -> str:
        return _six_digits(v)


class ForgotPasswordResponse(SQLModel):
    """
    `code` is only echoed back outside production, to ease local testing.
    """

    success: bool = True
    message: str
    code: str | None = None
