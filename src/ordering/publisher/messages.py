"""Integration messages the ordering service publishes to downstream consumers.

Consumed by kitchen/ops (OrderCreated starts preparation), by reviews
(purchase eligibility) and by notifications. Messages are immutable and
carry a versioned ``__type__`` string.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class OrderItemInfo:
    product_id: str
    product_name: str
    unit_price: float
    quantity: int
    line_total: float
    product_name_localized: str | None = None


@dataclass(frozen=True)
class _Message:
    __type__ = "Ordering.Message.v1"

    def to_dict(self) -> dict:
        payload = asdict(self)
        for key, value in payload.items():
            if isinstance(value, datetime):
                payload[key] = value.isoformat()
        return {"type": self.__type__, "data": payload}


@dataclass(frozen=True)
class OrderCreated(_Message):
    """An order was accepted for fulfillment: confirmed for pickup, or paid online."""

    __type__ = "Ordering.OrderCreated.v1"

    order_id: str
    user_id: str
    total_amount: float
    created_at: datetime
    items: list[OrderItemInfo] = field(default_factory=list)


@dataclass(frozen=True)
class OrderUpdated(_Message):
    """An administrator changed an order."""

    __type__ = "Ordering.OrderUpdated.v1"

    order_id: str
    status: str
    updated_at: datetime
    previous_status: str | None = None
    notes: str | None = None
    override: bool = False


@dataclass(frozen=True)
class OrderDeleted(_Message):
    __type__ = "Ordering.OrderDeleted.v1"

    order_id: str
    user_id: str
    deleted_at: datetime
