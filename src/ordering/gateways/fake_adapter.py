"""In-memory gateways — deterministic cart, catalog and profile services.

Used for development and tests. Each fake records its calls and can be
switched into a failing mode to simulate an unreachable service.
"""

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


class _Configurable:
    service_name = "unknown"

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Service unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool = True, failure_reason: str = "Service unavailable") -> None:
        """Configure the fake's behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def _record(self, method: str, **kwargs) -> None:
        self.calls.append({"method": method, **kwargs})
        if not self.should_succeed:
            raise UpstreamUnavailable(self.service_name, self.failure_reason)


class FakeCartService(_Configurable, CartReader):
    service_name = "cart"

    def __init__(self) -> None:
        super().__init__()
        self.carts: dict[str, list[CartLine]] = {}

    def put_items(self, user_id: str, items: list[tuple[str, int]]) -> None:
        """Replace a user's cart with ``(product_id, quantity)`` pairs."""
        self.carts[str(user_id)] = [CartLine(product_id=str(pid), quantity=qty) for pid, qty in items]

    def get_cart(self, user_id: str) -> CartSnapshot:
        self._record("get_cart", user_id=str(user_id))
        return CartSnapshot(user_id=str(user_id), items=list(self.carts.get(str(user_id), [])))

    def clear_cart(self, user_id: str) -> None:
        self._record("clear_cart", user_id=str(user_id))
        self.carts[str(user_id)] = []

    @property
    def cleared_for(self) -> list[str]:
        return [c["user_id"] for c in self.calls if c["method"] == "clear_cart"]


class FakeCatalogService(_Configurable, CatalogReader):
    service_name = "catalog"

    def __init__(self) -> None:
        super().__init__()
        self.products: dict[str, ProductInfo] = {}

    def put_product(
        self,
        product_id: str,
        name: str,
        price: float,
        is_available: bool = True,
        localized_name: str | None = None,
        effective_price: float | None = None,
        stock: int | None = None,
    ) -> ProductInfo:
        product = ProductInfo(
            id=str(product_id),
            name=name,
            price=price,
            is_available=is_available,
            localized_name=localized_name,
            effective_price=effective_price,
            stock=stock,
        )
        self.products[str(product_id)] = product
        return product

    def get_product(self, product_id: str) -> ProductInfo | None:
        self._record("get_product", product_id=str(product_id))
        return self.products.get(str(product_id))


class FakeProfileService(_Configurable, ProfileReader):
    service_name = "profile"

    def __init__(self) -> None:
        super().__init__()
        self.users: dict[str, UserInfo] = {}

    def put_user(self, user_id: str, phone_number: str | None = None, display_name: str | None = None) -> UserInfo:
        user = UserInfo(id=str(user_id), phone_number=phone_number, display_name=display_name)
        self.users[str(user_id)] = user
        return user

    def get_user(self, user_id: str) -> UserInfo | None:
        self._record("get_user", user_id=str(user_id))
        return self.users.get(str(user_id))
