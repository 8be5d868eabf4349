"""Order lifecycle — statuses, actions and the transition table.

Every status change goes through :func:`next_status`. The table below is
the single place that decides which (status, action) pairs are legal::

    Draft ──CONFIRM──▶ Pending ──MARK_PAID──▶ Paid
      │                  │  │                  │
      │                  │  └──COMPLETE──┐     ├──COMPLETE──▶ Completed
      └──CANCEL──────────┴──CANCEL───────┴─────┴──CANCEL────▶ Canceled

COMPLETE and CANCEL are the routine moves an administrative update makes.
ADMIN_OVERRIDE is the administrative escape hatch: it accepts any target,
and callers are expected to audit it (see :func:`is_routine`).

MARK_PAID is refused for Draft orders and for terminal ones: a payment
can only settle an order its owner has confirmed.
"""

from enum import Enum

from protean.exceptions import InvalidOperationError, ValidationError


class OrderStatus(Enum):
    DRAFT = "Draft"
    PENDING = "Pending"
    PAID = "Paid"
    COMPLETED = "Completed"
    CANCELED = "Canceled"


class PaymentType(Enum):
    ON_PICKUP = "OnPickup"
    ONLINE = "Online"


class OrderAction(Enum):
    CONFIRM = "Confirm"
    MARK_PAID = "MarkPaid"
    COMPLETE = "Complete"
    CANCEL = "Cancel"
    ADMIN_OVERRIDE = "AdminOverride"


TERMINAL_STATES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELED})

_TRANSITIONS = {
    (OrderStatus.DRAFT, OrderAction.CONFIRM): OrderStatus.PENDING,
    (OrderStatus.PENDING, OrderAction.MARK_PAID): OrderStatus.PAID,
    (OrderStatus.PAID, OrderAction.MARK_PAID): OrderStatus.PAID,  # Redelivered payment callback
    (OrderStatus.PENDING, OrderAction.COMPLETE): OrderStatus.COMPLETED,
    (OrderStatus.PAID, OrderAction.COMPLETE): OrderStatus.COMPLETED,
    (OrderStatus.DRAFT, OrderAction.CANCEL): OrderStatus.CANCELED,
    (OrderStatus.PENDING, OrderAction.CANCEL): OrderStatus.CANCELED,
    (OrderStatus.PAID, OrderAction.CANCEL): OrderStatus.CANCELED,
}

_REJECTIONS = {
    OrderAction.CONFIRM: "Only Draft orders can be confirmed",
    OrderAction.MARK_PAID: "Only Pending orders can be marked as paid",
    OrderAction.COMPLETE: "Only Pending or Paid orders can be completed",
    OrderAction.CANCEL: "Completed or canceled orders cannot be canceled",
}


def next_status(current: OrderStatus, action: OrderAction, target: OrderStatus | None = None) -> OrderStatus:
    """Return the status an order moves to, or raise if the move is illegal."""
    if action is OrderAction.ADMIN_OVERRIDE:
        if target is None:
            raise ValidationError({"status": ["An administrative override needs a target status"]})
        return target

    try:
        return _TRANSITIONS[(current, action)]
    except KeyError:
        raise InvalidOperationError(f"{_REJECTIONS[action]}. Current status: {current.value}") from None


def is_routine(current: OrderStatus, target: OrderStatus) -> bool:
    """True when some non-override action already moves ``current`` to ``target``."""
    if current == target:
        return True
    return any(src == current and dst == target for (src, _), dst in _TRANSITIONS.items())


def parse_status(value) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError({"status": [f"Unknown order status: {value}"]}) from None


def parse_payment_type(value) -> PaymentType:
    if isinstance(value, PaymentType):
        return value
    try:
        return PaymentType(value)
    except ValueError:
        raise ValidationError({"payment_type": [f"Unknown payment type: {value}"]}) from None
