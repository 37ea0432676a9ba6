# nilhub/client/session.py
"""
Client-side session state.

The token lives in a `SessionStore`; the account and store are kept in
memory by `AuthSession`. Call `revalidate()` once on startup so a token the
server no longer accepts is dropped.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

from nilhub.client.api_client import ApiError, NilHubClient

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    def get(self) -> str | None: ...

    def set(self, token: str) -> None: ...

    def clear(self) -> None: ...


class MemorySessionStore:
    def __init__(self, token: str | None = None):
        self._token = token

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileSessionStore:
    """
    Token persisted as JSON ({"token": "..."}) with owner-only permissions.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def get(self) -> str | None:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning("Unreadable session file %s: %s", self.path, e)
            return None
        token = raw.get("token") if isinstance(raw, dict) else None
        return token or None

    def set(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token}), encoding="utf-8")
        os.chmod(self.path, 0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class AuthSession:
    """
    Login state for an API client.

    - login / register store the token and remember account + store
    - logout forgets everything
    - refresh reloads account + store from /auth/me
    - revalidate checks a stored token on startup
    """

    def __init__(self, client: NilHubClient, store: SessionStore | None = None):
        self.client = client
        self.store = store or MemorySessionStore()
        self.account: dict[str, Any] | None = None
        self.shop: dict[str, Any] | None = None
        self.client.token = self.store.get()

    @property
    def is_authenticated(self) -> bool:
        return self.account is not None

    @property
    def is_admin(self) -> bool:
        return bool(self.account and self.account.get("role") == "admin")

    def _apply(self, account: dict[str, Any] | None, store: dict[str, Any] | None) -> None:
        self.account = account
        # Admins run the platform and have no store
        self.shop = None if self.is_admin else store

    def _start(self, data: dict[str, Any]) -> dict[str, Any]:
        self.store.set(data["token"])
        self.client.token = data["token"]
        self._apply(data.get("account"), data.get("store"))
        return data

    def login(self, email: str, password: str) -> dict[str, Any]:
        return self._start(self.client.auth.login(email, password))

    def register(self, **fields: Any) -> dict[str, Any]:
        return self._start(self.client.auth.register(**fields))

    def logout(self) -> None:
        self.store.clear()
        self.client.token = None
        self._apply(None, None)

    def refresh(self) -> None:
        if not self.client.token:
            logger.warning("No token to refresh")
            return
        data = self.client.auth.me()
        self._apply(data.get("account"), data.get("store"))

    def revalidate(self) -> bool:
        """
        Validate the stored token against the server.

        Returns True when the session is usable. A rejected token is
        cleared; an unreachable server keeps it for a later retry.
        """
        self.client.token = self.store.get()
        if not self.client.token:
            return False

        try:
            self.refresh()
        except ApiError as e:
            if e.is_auth_error:
                logger.info("Stored token rejected (%s); clearing session", e.message)
                self.logout()
            else:
                logger.warning("Could not validate session: %s", e.message)
            return False
        return True
