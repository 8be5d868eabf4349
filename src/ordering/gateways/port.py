"""Remote read gateways — abstract interfaces for the cart, catalog and profile services.

The checkout code programs against these ports; adapters are swapped via
configuration. Every read either returns a value, returns ``None`` when
the remote side says the record does not exist, or raises
``UpstreamUnavailable`` when the remote side could not answer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CartLine:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class CartSnapshot:
    """The cart service's view of a user's cart at read time."""

    user_id: str
    items: list[CartLine] = field(default_factory=list)


@dataclass(frozen=True)
class ProductInfo:
    """Catalog data for one product, as returned by the catalog service."""

    id: str
    name: str
    price: float
    is_available: bool
    localized_name: str | None = None
    effective_price: float | None = None
    stock: int | None = None

    @property
    def actual_price(self) -> float:
        """Price a buyer pays right now: the discounted price when one is set."""
        return self.effective_price if self.effective_price is not None else self.price


@dataclass(frozen=True)
class UserInfo:
    id: str
    phone_number: str | None = None
    display_name: str | None = None


class CartReader(ABC):
    """Reads and clears a user's cart in the cart service."""

    @abstractmethod
    def get_cart(self, user_id: str) -> CartSnapshot:
        """Return the user's cart. A user without a cart has an empty one."""
        ...

    @abstractmethod
    def clear_cart(self, user_id: str) -> None:
        """Remove every line from the user's cart."""
        ...


class CatalogReader(ABC):
    @abstractmethod
    def get_product(self, product_id: str) -> ProductInfo | None:
        """Return the product, or None when the catalog does not know it."""
        ...


class ProfileReader(ABC):
    @abstractmethod
    def get_user(self, user_id: str) -> UserInfo | None:
        """Return the user's profile, or None when it does not exist."""
        ...
