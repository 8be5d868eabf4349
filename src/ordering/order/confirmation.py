"""Order confirmation — command and handler.

The owner confirms a Draft with contact details and a payment type. Orders
paid on pickup are released once the confirmation commits; online orders
wait for the payment callback (see ``ordering.order.payment``).

Two confirmations racing on the same Draft are settled by the aggregate's
version: the slower write fails with ``ExpectedVersionError`` and the retried
handler then sees a Pending order and refuses it.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.order.transitions import PaymentType

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ConfirmOrder:
    order_id = Identifier(required=True)
    caller_user_id = Identifier(required=True)
    contact_name = String(required=True, max_length=100)
    contact_phone = String(required=True, max_length=30)
    contact_email = String(max_length=254)
    notes = String(max_length=1000)
    payment_type = String(required=True, choices=PaymentType)


@ordering.command_handler(part_of=Order)
class ConfirmOrderHandler:
    @handle(ConfirmOrder)
    def confirm_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)
        order.confirm(
            caller_user_id=command.caller_user_id,
            contact_name=command.contact_name,
            contact_phone=command.contact_phone,
            contact_email=command.contact_email,
            notes=command.notes,
            payment_type=command.payment_type,
        )
        repo.add(order)

        logger.info(
            "Order confirmed",
            order_id=str(order.id),
            user_id=str(order.user_id),
            payment_type=order.payment_type,
        )
        return str(order.id)
