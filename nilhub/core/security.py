# nilhub/core/security.py
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import jwt, JWTError

from nilhub.core.config import get_settings

logger = logging.getLogger(__name__)


# ----- Session tokens -----


def issue_token(
    account_id: uuid.UUID | str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Sign a session token bound to `account_id`.

    Claims:
      - sub: account id (string)
      - exp: now + expires_delta (default JWT_EXPIRE_DAYS)
    """
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(days=settings.JWT_EXPIRE_DAYS)

    expire = datetime.now(timezone.utc) + expires_delta
    claims = {"sub": str(account_id), "exp": expire}
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_token(token: str) -> dict[str, Any]:
    """
    Strictly decode and verify a session token.

    Raises:
        jose.ExpiredSignatureError: if the token is past its expiry.
        jose.JWTError: on bad signature or structure.
    """
    settings = get_settings()
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])


def verify_token(token: str) -> uuid.UUID | None:
    """
    Best-effort token check.

    Returns the account id, or None if the token is invalid, expired or
    carries a malformed subject. Never raises.
    """
    try:
        payload = decode_token(token)
        return uuid.UUID(str(payload.get("sub")))
    except (JWTError, ValueError) as e:
        logger.debug("Token rejected: %s", e)
        return None


# ----- Passwords -----

# bcrypt only reads the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def _password_bytes(raw: str) -> bytes:
    return raw.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(raw: str) -> str:
    return bcrypt.hashpw(_password_bytes(raw), bcrypt.gensalt()).decode("utf-8")


def verify_password(raw: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(raw), hashed.encode("utf-8"))
    except ValueError:
        # Stored hash is not a valid bcrypt string
        return False
