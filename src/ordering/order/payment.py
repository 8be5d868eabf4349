"""Order payment — command and handler.

Invoked by the trusted payment callback; there is no ownership check. The
first move to Paid of an online order releases it to fulfillment, which its
confirmation deferred. A redelivered callback for an already Paid order
changes nothing. Only confirmed orders can be paid.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class MarkOrderPaid:
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class MarkOrderPaidHandler:
    @handle(MarkOrderPaid)
    def mark_order_paid(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)

        if not order.mark_paid():
            logger.info("Order already paid, nothing to do", order_id=str(order.id))
            return str(order.id)

        repo.add(order)
        logger.info("Order marked as paid", order_id=str(order.id), payment_type=order.payment_type)
        return str(order.id)
