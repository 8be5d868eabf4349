"""Administrative order operations — update and delete.

Both are ops tooling. An update may set any status; moves that no routine
action could make are logged as overrides and flagged in the published
message. Deletion ignores the status entirely and records what it removed.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.order.transitions import OrderStatus, PaymentType
from ordering.publisher import get_publisher
from ordering.publisher.messages import OrderDeleted, OrderUpdated

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrder:
    order_id = Identifier(required=True)
    status = String(choices=OrderStatus)
    notes = String(max_length=1000)
    total_amount = Float(min_value=0.0)
    payment_type = String(choices=PaymentType)


@ordering.command(part_of="Order")
class DeleteOrder:
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class OrderAdministrationHandler:
    @handle(UpdateOrder)
    def update_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)

        previous, override = order.admin_update(
            status=command.status,
            notes=command.notes,
            total_amount=command.total_amount,
            payment_type=command.payment_type,
        )
        repo.add(order)

        if override:
            logger.warning(
                "Administrative status override",
                order_id=str(order.id),
                from_status=previous.value,
                to_status=order.status,
            )

        get_publisher().publish(
            OrderUpdated(
                order_id=str(order.id),
                status=order.status,
                previous_status=previous.value,
                notes=order.notes,
                override=override,
                updated_at=order.updated_at,
            )
        )
        return str(order.id)

    @handle(DeleteOrder)
    def delete_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)

        repo.remove(order)
        logger.warning(
            "Order deleted",
            order_id=str(order.id),
            user_id=str(order.user_id),
            status_at_deletion=order.status,
        )

        get_publisher().publish(
            OrderDeleted(
                order_id=str(order.id),
                user_id=str(order.user_id),
                deleted_at=datetime.now(UTC),
            )
        )
        return str(order.id)
