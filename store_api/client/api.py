import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class ApiError(Exception):
    """Non-2xx response from the store API."""

    def __init__(self, status_code: int, message: str, errors: Optional[dict] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.errors = errors or {}


class StoreClient:
    """Thin HTTP client for the storefront side of the store API.

    Keeps the bearer token returned by login and attaches it to every
    request. Logging out only forgets the token locally.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token: Optional[str] = None
        self.user: Optional[dict] = None

    def _request(self, method: str, path: str, **kwargs):
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = self.session.request(
                method, f"{self.base_url}{path}", headers=headers,
                timeout=self.timeout, **kwargs,
            )
        except requests.RequestException as e:
            logger.error("Request failed: %s %s: %s", method, path, e)
            raise

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            message = body.get("message", response.reason) if isinstance(body, dict) else response.reason
            errors = body.get("errors") if isinstance(body, dict) else None
            raise ApiError(response.status_code, message or "Request failed", errors)
        return body

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def register(self, name: str, email: str, password: str, phone: Optional[str] = None) -> dict:
        payload = {"name": name, "email": email, "password": password}
        if phone:
            payload["phone"] = phone
        return self._request("POST", "/api/auth/register", json=payload)

    def login(self, email: str, password: str) -> dict:
        body = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token = body["token"]
        self.user = body["user"]
        return body

    def logout(self) -> None:
        try:
            self._request("POST", "/api/auth/logout")
        finally:
            self.token = None
            self.user = None

    def products(self, featured: bool = False) -> list:
        return self._request("GET", "/api/products/featured" if featured else "/api/products")

    def product(self, product_id) -> dict:
        return self._request("GET", f"/api/products/{product_id}")

    def create_order(self, order: dict) -> dict:
        return self._request("POST", "/api/orders", json=order)["data"]

    def my_orders(self) -> list:
        return self._request("GET", "/api/user/orders")

    def cancel_order(self, order_id) -> dict:
        return self._request("POST", f"/api/user/orders/{order_id}/cancel")["data"]
