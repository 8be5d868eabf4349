"""Order line item lookups and quantity corrections.

Corrections are an administrative tool that works beside the lifecycle:
any order status is accepted, any integer quantity is accepted, and the
order's ``total_amount`` stays as it was when the order was built.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, OrderItem

logger = structlog.get_logger(__name__)


def list_items_by_order(order_id) -> list[OrderItem]:
    """Return the order's items, oldest first."""
    order = current_domain.repository_for(Order).get_order(order_id)
    return order.sorted_items()


def get_item(item_id) -> OrderItem | None:
    results = current_domain.repository_for(OrderItem).query.filter(id=str(item_id)).all().items
    return results[0] if results else None


@ordering.command(part_of="Order")
class CorrectItemQuantity:
    item_id = Identifier(required=True)
    new_quantity = Integer(required=True)


@ordering.command_handler(part_of=Order)
class CorrectItemQuantityHandler:
    @handle(CorrectItemQuantity)
    def correct_item_quantity(self, command):
        item = get_item(command.item_id)
        if item is None:
            raise ObjectNotFoundError(f"Order item with ID '{command.item_id}' not found.")

        repo = current_domain.repository_for(Order)
        order = repo.get_order(item.order_id)
        previous_quantity = order.correct_item_quantity(command.item_id, command.new_quantity)
        repo.add(order)

        logger.info(
            "Order item quantity corrected",
            order_id=str(order.id),
            item_id=str(command.item_id),
            previous_quantity=previous_quantity,
            new_quantity=command.new_quantity,
        )
        return str(command.item_id)
