"""Order aggregate — the core of the ordering domain.

Orders are born as Drafts (from a cart or from pre-validated admin data),
confirmed by their owner and paid through the payments service. Completed
and Canceled are reached through administrative updates. Legality of every
status change is decided by the transition table in
``ordering.order.transitions``.

Line items keep snapshots of the catalog data they were built from: the
product name and effective unit price are copied once and never refreshed.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
)

from ordering.domain import ordering
from ordering.exceptions import NotOrderOwnerError
from ordering.order.events import OrderReleased
from ordering.order.transitions import (
    OrderAction,
    OrderStatus,
    PaymentType,
    is_routine,
    next_status,
    parse_payment_type,
    parse_status,
)
from ordering.publisher.messages import OrderCreated, OrderItemInfo


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A line of an order: one product, a quantity and the price it was sold at.

    ``line_number`` preserves the order in which lines were built, since all
    lines of an order share the same creation timestamp.
    """

    product_id = Identifier(required=True)
    product_name_snapshot = String(required=True, max_length=250)
    product_name_snapshot_localized = String(max_length=250)
    unit_price_snapshot = Float(required=True, min_value=0.0)
    quantity = Integer(required=True)
    line_number = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    @property
    def line_total(self) -> float:
        return self.unit_price_snapshot * self.quantity


_REQUIRED_LINE_FIELDS = ("product_id", "product_name_snapshot", "unit_price_snapshot", "quantity")


def _parse_line(item) -> dict:
    """Normalize one line of draft input, rejecting anything malformed."""
    missing = [name for name in _REQUIRED_LINE_FIELDS if item.get(name) in (None, "")]
    if missing:
        raise ValidationError({name: ["is required"] for name in missing})

    try:
        quantity = int(item["quantity"])
    except (TypeError, ValueError):
        raise ValidationError({"quantity": [f"Quantity must be a whole number, got {item['quantity']!r}"]}) from None
    if quantity <= 0:
        raise ValidationError({"quantity": ["Quantity must be at least 1"]})

    try:
        unit_price = float(item["unit_price_snapshot"])
    except (TypeError, ValueError):
        raise ValidationError(
            {"unit_price_snapshot": [f"Price must be a number, got {item['unit_price_snapshot']!r}"]}
        ) from None

    return {
        "product_id": item["product_id"],
        "product_name_snapshot": item["product_name_snapshot"],
        "product_name_snapshot_localized": item.get("product_name_snapshot_localized"),
        "unit_price_snapshot": unit_price,
        "quantity": quantity,
    }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    user_id = Identifier(required=True)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.DRAFT.value,
    )
    items = HasMany(OrderItem)
    total_amount = Float(default=0.0, min_value=0.0)
    contact_name = String(max_length=100)
    contact_phone = String(max_length=30)
    contact_email = String(max_length=254)
    notes = String(max_length=1000)
    payment_type = String(choices=PaymentType)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create_draft(cls, user_id, items_data, total_amount=None):
        """Build a Draft order from already-resolved line data.

        Args:
            user_id: The owner of the order.
            items_data: List of dicts with product_id, product_name_snapshot,
                        unit_price_snapshot, quantity and optionally
                        product_name_snapshot_localized.
            total_amount: Optional caller-side total. When given it must match
                          the sum of the line totals.
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        lines = [_parse_line(item) for item in items_data]

        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            status=OrderStatus.DRAFT.value,
            created_at=now,
            updated_at=now,
        )
        for line_number, line in enumerate(lines, start=1):
            order.add_items(OrderItem(**line, line_number=line_number, created_at=now, updated_at=now))

        computed_total = order.items_total()
        if total_amount is not None and round(float(total_amount), 2) != round(computed_total, 2):
            raise ValidationError(
                {"total_amount": [f"Total {total_amount} does not match the sum of the items ({computed_total})"]}
            )
        order.total_amount = computed_total
        return order

    def items_total(self) -> float:
        return sum(item.line_total for item in self.items)

    def sorted_items(self) -> list[OrderItem]:
        return sorted(self.items, key=lambda item: (item.created_at, item.line_number or 0))

    def is_owned_by(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    # -------------------------------------------------------------------
    # Order lifecycle transitions
    # -------------------------------------------------------------------
    def confirm(self, caller_user_id, contact_name, contact_phone, payment_type, contact_email=None, notes=None):
        """Confirm a Draft on behalf of its owner. Returns the new status."""
        if not self.is_owned_by(caller_user_id):
            raise NotOrderOwnerError(caller_user_id, self.id)

        new_status = next_status(OrderStatus(self.status), OrderAction.CONFIRM)

        self.contact_name = contact_name
        self.contact_phone = contact_phone
        self.contact_email = contact_email
        self.notes = notes
        self.payment_type = parse_payment_type(payment_type).value
        self.status = new_status.value
        self.updated_at = datetime.now(UTC)

        if self.payment_type == PaymentType.ON_PICKUP.value:
            self._release()
        return new_status

    def mark_paid(self) -> bool:
        """Move the order to Paid. Returns False when it already was Paid.

        Online orders were held back at confirmation, so their first move to
        Paid releases them.
        """
        current = OrderStatus(self.status)
        new_status = next_status(current, OrderAction.MARK_PAID)
        if new_status == current:
            return False

        self.status = new_status.value
        self.updated_at = datetime.now(UTC)

        if self.payment_type == PaymentType.ONLINE.value:
            self._release()
        return True

    def _release(self):
        self.raise_(
            OrderReleased(
                order_id=str(self.id),
                user_id=str(self.user_id),
                payment_type=self.payment_type,
                released_at=self.updated_at,
            )
        )

    def admin_update(self, status=None, notes=None, total_amount=None, payment_type=None):
        """Apply an administrative change to any subset of fields.

        Returns ``(previous_status, override)`` where ``override`` is True when
        the status change is one no routine action could have made.
        """
        previous = OrderStatus(self.status)
        override = False

        if status is not None:
            target = parse_status(status)
            override = not is_routine(previous, target)
            self.status = next_status(previous, OrderAction.ADMIN_OVERRIDE, target).value
        if notes is not None:
            self.notes = notes
        if total_amount is not None:
            self.total_amount = float(total_amount)
        if payment_type is not None:
            self.payment_type = parse_payment_type(payment_type).value

        self.updated_at = datetime.now(UTC)
        return previous, override

    # -------------------------------------------------------------------
    # Line item corrections
    # -------------------------------------------------------------------
    def find_item(self, item_id) -> OrderItem | None:
        return next((i for i in self.items if str(i.id) == str(item_id)), None)

    def correct_item_quantity(self, item_id, new_quantity):
        """Overwrite an item's quantity. ``total_amount`` is left as it was."""
        item = self.find_item(item_id)
        if item is None:
            raise ObjectNotFoundError(f"Order item with ID '{item_id}' not found.")

        now = datetime.now(UTC)
        previous_quantity = item.quantity
        item.quantity = int(new_quantity)
        item.updated_at = now
        self.updated_at = now
        return previous_quantity

    # -------------------------------------------------------------------
    # Integration messages
    # -------------------------------------------------------------------
    def to_order_created(self) -> OrderCreated:
        return OrderCreated(
            order_id=str(self.id),
            user_id=str(self.user_id),
            total_amount=self.total_amount,
            created_at=self.created_at,
            items=[
                OrderItemInfo(
                    product_id=str(item.product_id),
                    product_name=item.product_name_snapshot,
                    product_name_localized=item.product_name_snapshot_localized,
                    unit_price=item.unit_price_snapshot,
                    quantity=item.quantity,
                    line_total=item.line_total,
                )
                for item in self.sorted_items()
            ],
        )
