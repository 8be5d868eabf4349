"""Cart-to-order assembly — reads the cart, catalog and profile services and
resolves the lines a Draft order will be built from.

The cart read runs first because it yields the product ids. The product
reads (one per distinct product) and the profile read are independent and
run together on a bounded thread pool; all of them are joined before any
price or quantity is computed.

Partial availability: a line whose product the catalog does not know, or
marks unavailable, is dropped from the order. Only when no line survives is
the conversion rejected. A catalog or profile service that cannot answer
is a different failure (``UpstreamUnavailable``) and is never mistaken for
"product unavailable".
"""

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import structlog
from protean.exceptions import InvalidOperationError

from ordering.gateways import get_cart_reader, get_catalog_reader, get_profile_reader
from ordering.gateways.port import CartReader, CatalogReader, ProductInfo, ProfileReader

logger = structlog.get_logger(__name__)

DEFAULT_FANOUT_WORKERS = 8


@dataclass(frozen=True)
class AssembledOrder:
    user_id: str
    items_data: list[dict] = field(default_factory=list)
    total_amount: float = 0.0
    dropped_product_ids: list[str] = field(default_factory=list)


class CartToOrderAssembler:
    def __init__(
        self,
        cart_reader: CartReader,
        catalog_reader: CatalogReader,
        profile_reader: ProfileReader,
        max_workers: int | None = None,
    ) -> None:
        self.cart_reader = cart_reader
        self.catalog_reader = catalog_reader
        self.profile_reader = profile_reader
        self.max_workers = max_workers or int(os.environ.get("CHECKOUT_FANOUT_WORKERS", DEFAULT_FANOUT_WORKERS))

    @classmethod
    def from_gateways(cls) -> "CartToOrderAssembler":
        return cls(get_cart_reader(), get_catalog_reader(), get_profile_reader())

    def assemble(self, user_id) -> AssembledOrder:
        user_id = str(user_id)

        cart = self.cart_reader.get_cart(user_id)
        if not cart.items:
            raise InvalidOperationError("Cart is empty")

        product_ids = list(dict.fromkeys(str(line.product_id) for line in cart.items))

        workers = max(1, min(self.max_workers, len(product_ids) + 1))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="checkout-fanout") as pool:
            profile_future = pool.submit(self.profile_reader.get_user, user_id)
            product_futures = {pid: pool.submit(self.catalog_reader.get_product, pid) for pid in product_ids}

            products: dict[str, ProductInfo | None] = {pid: f.result() for pid, f in product_futures.items()}
            user = profile_future.result()

        items_data = []
        dropped = []
        for line in cart.items:
            product = products.get(str(line.product_id))
            if product is None or not product.is_available:
                dropped.append(str(line.product_id))
                continue
            items_data.append(
                {
                    "product_id": str(line.product_id),
                    "product_name_snapshot": product.name,
                    "product_name_snapshot_localized": product.localized_name,
                    "unit_price_snapshot": product.actual_price,
                    "quantity": line.quantity,
                }
            )

        if dropped:
            logger.info("Dropped unavailable cart lines", user_id=user_id, product_ids=dropped)

        if not items_data:
            raise InvalidOperationError("No valid products found in cart. All products are unavailable.")

        if user is None:
            raise InvalidOperationError("Failed to fetch user information")
        if not (user.phone_number or "").strip():
            raise InvalidOperationError("Phone number is required. Please update your profile.")

        total_amount = sum(item["unit_price_snapshot"] * item["quantity"] for item in items_data)
        return AssembledOrder(
            user_id=user_id,
            items_data=items_data,
            total_amount=total_amount,
            dropped_product_ids=dropped,
        )
