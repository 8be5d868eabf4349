"""HTTP gateways — talk to the cart, catalog and profile services via httpx.

Status handling is the same for every service:

- 2xx: the body is parsed into the port's dataclass
- 404: the record does not exist (``None``, or an empty cart)
- anything else, timeouts and transport errors: ``UpstreamUnavailable``

Retries are the transport's concern (``httpx.HTTPTransport(retries=...)``),
never the caller's.
"""

import httpx
import structlog

from ordering.exceptions import UpstreamUnavailable
from ordering.gateways.port import (
    CartLine,
    CartReader,
    CartSnapshot,
    CatalogReader,
    ProductInfo,
    ProfileReader,
    UserInfo,
)

logger = structlog.get_logger(__name__)

USER_HEADER = "X-User-Id"


class _HttpGateway:
    service_name = "unknown"

    def __init__(self, base_url: str, timeout: float = 5.0, retries: int = 0, client: httpx.Client | None = None):
        self._client = client or httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            transport=httpx.HTTPTransport(retries=retries),
            headers={"Accept": "application/json"},
        )

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response | None:
        """Issue a request; return None on 404 and raise on every other failure."""
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error(
                "Upstream request failed",
                service=self.service_name,
                url=url,
                error=str(exc),
            )
            raise UpstreamUnavailable(self.service_name, str(exc) or exc.__class__.__name__) from exc

        if response.status_code == 404:
            return None
        if response.is_error:
            logger.warning(
                "Upstream returned an error status",
                service=self.service_name,
                url=url,
                status_code=response.status_code,
            )
            raise UpstreamUnavailable(self.service_name, f"HTTP {response.status_code}")
        return response


class HttpCartService(_HttpGateway, CartReader):
    service_name = "cart"

    def get_cart(self, user_id: str) -> CartSnapshot:
        response = self._request("GET", "/api/cart", headers={USER_HEADER: str(user_id)})
        if response is None:
            return CartSnapshot(user_id=str(user_id), items=[])

        body = response.json() or {}
        items = [
            CartLine(product_id=str(line["productId"]), quantity=int(line["quantity"]))
            for line in body.get("items") or []
        ]
        logger.info("Retrieved cart", user_id=str(user_id), item_count=len(items))
        return CartSnapshot(user_id=str(user_id), items=items)

    def clear_cart(self, user_id: str) -> None:
        self._request("DELETE", "/api/cart", headers={USER_HEADER: str(user_id)})
        logger.info("Cleared cart", user_id=str(user_id))


class HttpCatalogService(_HttpGateway, CatalogReader):
    service_name = "catalog"

    def get_product(self, product_id: str) -> ProductInfo | None:
        response = self._request("GET", f"/api/products/{product_id}")
        if response is None:
            logger.warning("Product not found", product_id=str(product_id))
            return None

        body = response.json()
        return ProductInfo(
            id=str(body["id"]),
            name=body.get("name") or "",
            localized_name=body.get("nameUk"),
            price=float(body["price"]),
            effective_price=float(body["discountPrice"]) if body.get("discountPrice") is not None else None,
            is_available=bool(body.get("isAvailable", False)),
            stock=body.get("stock"),
        )


class HttpProfileService(_HttpGateway, ProfileReader):
    service_name = "profile"

    def get_user(self, user_id: str) -> UserInfo | None:
        response = self._request("GET", f"/api/users/{user_id}")
        if response is None:
            return None

        body = response.json()
        first, last = body.get("firstName"), body.get("lastName")
        if first and last:
            display_name = f"{first} {last}"
        else:
            display_name = body.get("displayName") or body.get("userName") or "Unknown User"

        return UserInfo(
            id=str(body["id"]),
            phone_number=body.get("phoneNumber") or None,
            display_name=display_name,
        )
