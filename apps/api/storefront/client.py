"""HTTP client for the storefront API.

State that a browser front end would keep for the signed-in shopper (token,
profile, cart snapshot) lives on an explicit ``ClientSession`` owned by the
caller, so two sessions never see each other's data.
"""

from dataclasses import dataclass, field
from typing import Any

import httpx


class ApiError(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


@dataclass
class ClientSession:
    token: str | None = None
    user: dict[str, Any] | None = None
    cart_items: list[dict[str, Any]] = field(default_factory=list)
    cart_total: float = 0.0

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def cart_count(self) -> int:
        return sum(int(item.get("quantity", 0)) for item in self.cart_items)

    def sign_in(self, token: str, user: dict[str, Any] | None = None) -> None:
        self.token = token
        self.user = user

    def sign_out(self) -> None:
        self.token = None
        self.user = None
        self.cart_items = []
        self.cart_total = 0.0


class StorefrontClient:
    def __init__(
        self,
        base_url: str,
        session: ClientSession,
        timeout_s: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.session = session
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout_s,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "StorefrontClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        if self.session.token:
            return {"Authorization": f"Bearer {self.session.token}"}
        return {}

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = self._http.request(method, path, headers=self._headers(), **kwargs)
        except httpx.TransportError as err:
            raise ApiError(0, f"Transport error: {err}") from err

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_error or body.get("status") == "error":
            message = body.get("message") or f"HTTP error! status: {response.status_code}"
            raise ApiError(response.status_code, message)
        return body

    # Catalogue

    def list_products(
        self,
        *,
        category: str | None = None,
        search: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        params = {
            key: value
            for key, value in {
                "category": category,
                "search": search,
                "page": page,
                "limit": limit,
            }.items()
            if value is not None
        }
        return self._request("GET", "/products", params=params)["data"]["products"]

    def featured_products(self) -> list[dict[str, Any]]:
        return self._request("GET", "/products/featured")["data"]["products"]

    # Cart

    def refresh_cart(self) -> list[dict[str, Any]]:
        self._store_cart(self._request("GET", "/cart")["data"])
        return self.session.cart_items

    def add_to_cart(self, product_id: str, quantity: int = 1) -> list[dict[str, Any]]:
        if not self.session.is_authenticated:
            raise ApiError(401, "Please login to add items to cart")
        body = self._request("POST", "/cart", json={"product_id": product_id, "quantity": quantity})
        self._store_cart(body["data"])
        return self.session.cart_items

    def _store_cart(self, data: dict[str, Any]) -> None:
        self.session.cart_items = list(data.get("cartItems", []))
        self.session.cart_total = float(data.get("total", 0))

    # Orders and tracking

    def place_order(self, **customer: Any) -> dict[str, Any]:
        order = self._request("POST", "/orders", json=customer)["data"]["order"]
        self.session.cart_items = []
        self.session.cart_total = 0.0
        return order

    def my_orders(self) -> list[dict[str, Any]]:
        return self._request("GET", "/orders")["data"]["orders"]

    def track_order(self, order_id: str) -> dict[str, Any]:
        return self._request("GET", f"/tracking/user/{order_id}")["data"]

    def submit_inquiry(self, **inquiry: Any) -> dict[str, Any]:
        return self._request("POST", "/inquiries", json=inquiry)["data"]["inquiry"]

    # Admin console

    def dashboard(self) -> dict[str, Any]:
        return self._request("GET", "/admin/dashboard")["data"]

    def admin_orders(self, **filters: Any) -> list[dict[str, Any]]:
        params = {key: value for key, value in filters.items() if value is not None}
        return self._request("GET", "/admin/orders", params=params)["data"]["orders"]

    def update_order_status(self, order_id: str, status: str) -> dict[str, Any]:
        body = self._request("PATCH", f"/admin/orders/{order_id}/status", json={"status": status})
        return body["data"]["order"]

    def create_product(self, **product: Any) -> dict[str, Any]:
        return self._request("POST", "/admin/products", json=product)["data"]["product"]

    def delete_product(self, product_id: str) -> None:
        self._request("DELETE", f"/admin/products/{product_id}")
