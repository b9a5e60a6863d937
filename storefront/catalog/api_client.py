"""
Storefront API Client

Client for the storefront backend REST API (catalog, orders, quotations,
auth). Handles authentication headers, response unwrapping and error
handling. Failed requests are logged and return None; the caller decides
how to surface the failure. There are no automatic retries: a failed
fetch is retried by the shopper.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from ..models import (
    Category,
    OrderSummary,
    Product,
    categories_from_api,
    category_from_api,
    product_from_api,
    products_from_api,
    summaries_from_api,
    CatalogRecordError,
)

logger = logging.getLogger(__name__)


@dataclass
class ProductPage:
    """One page of a product listing."""
    products: List[Product] = field(default_factory=list)
    total_pages: int = 0
    total_products: int = 0


class StorefrontAPIClient:
    """
    Client for the storefront backend.

    Usage:
        client = StorefrontAPIClient(base_url="http://localhost:3001/api")

        categories = client.get_categories()
        product = client.get_product("p-1")

        client.set_token(token)
        order = client.create_order(payload)
    """

    SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: int = 30):
        """
        Initialize the API client.

        Args:
            base_url: API root, e.g. "http://localhost:3001/api"
            token: Optional bearer token for customer endpoints
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
        })
        self.token: Optional[str] = None
        self.set_token(token)

        # Message of the most recent failure, shown inline by checkout
        self.last_error: Optional[str] = None
        self.requests_made = 0

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def set_token(self, token: Optional[str]) -> None:
        """Set or clear the bearer token sent with every request."""
        self.token = token
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        else:
            self.session.headers.pop("Authorization", None)

    @staticmethod
    def _error_message(response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"API request failed: {response.status_code}"
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        return f"API request failed: {response.status_code}"

    def request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict] = None,
        params: Optional[Dict] = None,
    ) -> Optional[Any]:
        """
        Make a REST API request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: Path below base_url (e.g., "/categories")
            data: JSON body for POST/PUT
            params: Query string parameters

        Returns:
            Response payload (the `data` member of a {success, data}
            envelope) or None on error
        """
        if method not in self.SUPPORTED_METHODS:
            raise ValueError(f"Unsupported method: {method}")

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        self.requests_made += 1
        self.last_error = None

        try:
            response = self.session.request(
                method, url, json=data, params=params, timeout=self.timeout
            )
        except requests.exceptions.Timeout:
            logger.error("Request timeout: %s %s", method, endpoint)
            self.last_error = "Request timed out"
            return None
        except requests.exceptions.RequestException as e:
            logger.error("Request failed: %s", e)
            self.last_error = "Could not reach the server"
            return None

        if response.status_code >= 400:
            self.last_error = self._error_message(response)
            logger.error("API Error %d on %s %s: %s",
                         response.status_code, method, endpoint, self.last_error)
            return None

        try:
            body = response.json()
        except ValueError:
            logger.error("Invalid JSON from %s %s", method, endpoint)
            self.last_error = "Invalid response from server"
            return None

        if isinstance(body, dict) and body.get("success") is True and "data" in body:
            return body["data"]
        return body

    # ── Catalog ──────────────────────────────────────────────────────────────

    def get_categories(self, root_only: bool = False) -> Optional[List[Category]]:
        """Fetch all categories (or only root categories)."""
        payload = self.request("GET", "/categories")
        if payload is None:
            return None
        categories = categories_from_api(payload)
        if root_only:
            categories = [c for c in categories if c.is_root]
        return categories

    def get_category(self, category_id: str) -> Optional[Category]:
        payload = self.request("GET", f"/categories/{category_id}")
        if payload is None:
            return None
        try:
            return category_from_api(payload)
        except CatalogRecordError as e:
            logger.error("Bad category %s: %s", category_id, e)
            self.last_error = "Invalid category data"
            return None

    def get_subcategories(self, category_id: str) -> Optional[List[Category]]:
        payload = self.request("GET", f"/categories/{category_id}/subcategories")
        if payload is None:
            return None
        return categories_from_api(payload)

    def _product_page(self, payload: Any) -> ProductPage:
        if isinstance(payload, list):
            products = products_from_api(payload)
            return ProductPage(products, 1, len(products))

        products = products_from_api(payload.get("products") or [])
        pagination = payload.get("pagination") or {}
        return ProductPage(
            products=products,
            total_pages=pagination.get("totalPages") or 1,
            total_products=pagination.get("total") or len(products),
        )

    def get_products_by_category(
        self, category_id: str, page: int = 1, per_page: int = 20
    ) -> Optional[ProductPage]:
        payload = self.request(
            "GET", f"/categories/{category_id}/products",
            params={"page": page, "limit": per_page},
        )
        if payload is None:
            return None
        return self._product_page(payload)

    def get_products(self, page: int = 1, per_page: int = 20) -> Optional[ProductPage]:
        payload = self.request("GET", "/products", params={"page": page, "limit": per_page})
        if payload is None:
            return None
        return self._product_page(payload)

    def search_products(self, query: str, page: int = 1, per_page: int = 20) -> Optional[ProductPage]:
        payload = self.request(
            "GET", "/products/search",
            params={"q": query, "page": page, "limit": per_page},
        )
        if payload is None:
            return None
        return self._product_page(payload)

    def get_product(self, product_id: str) -> Optional[Product]:
        payload = self.request("GET", f"/products/{product_id}")
        if payload is None:
            return None
        try:
            return product_from_api(payload)
        except CatalogRecordError as e:
            logger.error("Bad product %s: %s", product_id, e)
            self.last_error = "Invalid product data"
            return None

    # ── Orders & quotations ──────────────────────────────────────────────────

    def create_order(self, order: Dict[str, Any]) -> Optional[Dict]:
        return self.request("POST", "/orders", data=order)

    def create_quotation(self, quotation: Dict[str, Any]) -> Optional[Dict]:
        return self.request("POST", "/quotations", data=quotation)

    def submit_quotation(self, quotation_id: str) -> Optional[Dict]:
        """Move a draft quotation to PENDING_APPROVAL."""
        return self.request("POST", f"/quotations/{quotation_id}/submit")

    def get_my_orders(self, page: int = 1, limit: int = 20,
                      status: Optional[str] = None) -> Optional[List[OrderSummary]]:
        """Signed-in customer's orders, newest first."""
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        payload = self.request("GET", "/orders/my-orders", params=params)
        if payload is None:
            return None
        return summaries_from_api(payload, "order")

    def get_my_quotations(self) -> Optional[List[OrderSummary]]:
        payload = self.request("GET", "/quotations")
        if payload is None:
            return None
        return summaries_from_api(payload, "quotation")

    # ── Auth ─────────────────────────────────────────────────────────────────

    def login(self, credentials: Dict[str, str]) -> Optional[Dict]:
        """POST /auth/login; returns {user, token, refreshToken} or None."""
        return self.request("POST", "/auth/login", data=credentials)

    def get_me(self) -> Optional[Dict]:
        return self.request("GET", "/auth/me")

    def logout(self, refresh_token: str) -> Optional[Any]:
        return self.request("POST", "/auth/logout", data={"refreshToken": refresh_token})
