# nilhub/client/api_client.py
"""
Typed HTTP client for the NilHub API.

Every endpoint answers with the envelope

    {"success": true, "data": ..., "count": n?, "message": "..."?}
    {"success": false, "error": "..."}

Methods return the `data` part; error envelopes become `ApiError`.
"""

import logging
from typing import Any, BinaryIO, Iterable

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000/api"

# (filename, content, content_type)
FileTuple = tuple[str, bytes | BinaryIO, str]


class ApiError(Exception):
    """
    Failed API call.

    Attributes:
        status_code: HTTP status, or None when the server was unreachable.
        message: the server's `error` (or `message`) text.
        payload: decoded error body, if any.
    """

    def __init__(self, status_code: int | None, message: str, payload: Any = None):
        self.status_code = status_code
        self.message = message
        self.payload = payload
        super().__init__(message)

    @property
    def is_auth_error(self) -> bool:
        return self.status_code == 401


class NilHubClient:
    """
    Thin wrapper around httpx.

    Args:
        base_url: API root, e.g. "https://api.nilhub.xyz/api".
        token: bearer token sent on authenticated calls.
        http: existing httpx.Client (FastAPI's TestClient works too).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: str | None = None,
        http: httpx.Client | None = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._owns_http = http is None
        self.http = http or httpx.Client(timeout=timeout)

        self.auth = AuthApi(self)
        self.products = ProductsApi(self)
        self.stores = StoresApi(self)
        self.upload = UploadApi(self)
        self.stats = StatsApi(self)

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "NilHubClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ----- Transport -----

    def _headers(self, authenticated: bool) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if authenticated and self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            raise ApiError(
                response.status_code,
                f"HTTP error {response.status_code}: {response.reason_phrase}",
            )

        if response.is_error or (isinstance(body, dict) and body.get("success") is False):
            message = "Request failed"
            if isinstance(body, dict):
                message = body.get("error") or body.get("message") or message
            raise ApiError(response.status_code, message, body)
        return body

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        files: Any = None,
        authenticated: bool = True,
    ) -> dict[str, Any]:
        """Send a request and return the decoded success envelope."""
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            response = self.http.request(
                method,
                f"{self.base_url}{path}",
                json=json,
                params=params or None,
                files=files,
                headers=self._headers(authenticated),
            )
        except httpx.TransportError as e:
            logger.warning("%s %s unreachable: %s", method, path, e)
            raise ApiError(None, "Could not connect to the server") from e
        return self._decode(response)

    def data(self, method: str, path: str, **kwargs) -> Any:
        return self.request(method, path, **kwargs).get("data")


class _Resource:
    def __init__(self, client: NilHubClient):
        self.client = client


class AuthApi(_Resource):
    def register(
        self,
        name: str,
        email: str,
        password: str,
        store_name: str,
        whatsapp: str,
        instagram: str | None = None,
        facebook: str | None = None,
    ) -> dict[str, Any]:
        payload = {
            "name": name,
            "email": email,
            "password": password,
            "store_name": store_name,
            "whatsapp": whatsapp,
        }
        if instagram:
            payload["instagram"] = instagram
        if facebook:
            payload["facebook"] = facebook
        return self.client.data("POST", "/auth/register", json=payload, authenticated=False)

    def login(self, email: str, password: str) -> dict[str, Any]:
        return self.client.data(
            "POST",
            "/auth/login",
            json={"email": email, "password": password},
            authenticated=False,
        )

    def me(self) -> dict[str, Any]:
        return self.client.data("GET", "/auth/me")

    def forgot_password(self, email: str, method: str = "email") -> dict[str, Any]:
        # This endpoint answers without a `data` field
        return self.client.request(
            "POST",
            "/auth/forgot-password",
            json={"email": email, "method": method},
            authenticated=False,
        )

    def verify_reset_code(self, email: str, code: str) -> str:
        body = self.client.request(
            "POST",
            "/auth/verify-reset-code",
            json={"email": email, "code": code},
            authenticated=False,
        )
        return body.get("message", "")

    def reset_password(self, email: str, code: str, new_password: str) -> str:
        body = self.client.request(
            "POST",
            "/auth/reset-password",
            json={"email": email, "code": code, "new_password": new_password},
            authenticated=False,
        )
        return body.get("message", "")


class ProductsApi(_Resource):
    def mine(self) -> list[dict[str, Any]]:
        return self.client.data("GET", "/products/mine")

    def get(self, product_id: str) -> dict[str, Any]:
        return self.client.data("GET", f"/products/{product_id}", authenticated=False)

    def related(self, product_id: str, limit: int | None = None) -> list[dict[str, Any]]:
        return self.client.data(
            "GET",
            f"/products/{product_id}/related",
            params={"limit": limit},
            authenticated=False,
        )

    def create(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.client.data("POST", "/products", json=data)

    def update(self, product_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self.client.data("PUT", f"/products/{product_id}", json=data)

    def update_stock(self, product_id: str, stock: int) -> dict[str, Any]:
        return self.client.data("PATCH", f"/products/{product_id}/stock", json={"stock": stock})

    def delete(self, product_id: str) -> None:
        self.client.request("DELETE", f"/products/{product_id}")

    def whatsapp_click(self, product_id: str) -> int:
        data = self.client.data(
            "POST", f"/products/{product_id}/whatsapp-click", authenticated=False
        )
        return data["whatsapp_clicks"]


class StoresApi(_Resource):
    def mine(self) -> dict[str, Any]:
        return self.client.data("GET", "/stores/me")

    def create(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.client.data("POST", "/stores", json=data)

    def update_mine(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.client.data("PUT", "/stores/me", json=data)

    def get_by_slug(self, slug: str) -> dict[str, Any]:
        return self.client.data("GET", f"/stores/{slug}", authenticated=False)

    def products(
        self,
        slug: str,
        category: str | None = None,
        search: str | None = None,
    ) -> list[dict[str, Any]]:
        return self.client.data(
            "GET",
            f"/stores/{slug}/products",
            params={"category": category, "search": search},
            authenticated=False,
        )

    def update(self, store_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self.client.data("PUT", f"/stores/{store_id}", json=data)


class UploadApi(_Resource):
    def image(self, file: FileTuple, folder: str | None = None) -> dict[str, Any]:
        return self.client.data(
            "POST",
            "/upload/image",
            files=[("image", file)],
            params={"folder": folder},
        )

    def images(self, files: Iterable[FileTuple], folder: str | None = None) -> list[dict[str, Any]]:
        return self.client.data(
            "POST",
            "/upload/images",
            files=[("images", f) for f in files],
            params={"folder": folder},
        )

    def delete(self, asset_id: str) -> None:
        self.client.request("DELETE", f"/upload/{asset_id.lstrip('/')}")


class StatsApi(_Resource):
    def dashboard(self) -> dict[str, Any]:
        return self.client.data("GET", "/stats/dashboard")
