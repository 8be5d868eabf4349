"""Cart-to-order conversion — command and handler.

Produces a Draft order from the caller's cart. The cart itself is left
untouched; it is cleared only once the order is confirmed for pickup or
paid online.
"""

import structlog
from protean import handle
from protean.fields import Identifier

from ordering.checkout.assembler import CartToOrderAssembler
from ordering.domain import ordering
from ordering.order.creation import persist_draft
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CreateOrderFromCart:
    user_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class CreateOrderFromCartHandler:
    @handle(CreateOrderFromCart)
    def create_order_from_cart(self, command):
        assembled = CartToOrderAssembler.from_gateways().assemble(command.user_id)
        order = persist_draft(assembled.user_id, assembled.items_data, assembled.total_amount)
        logger.info(
            "Cart converted to draft order",
            order_id=str(order.id),
            user_id=assembled.user_id,
            dropped_lines=len(assembled.dropped_product_ids),
        )
        return str(order.id)
