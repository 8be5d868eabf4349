"""Inbound cross-domain event handler — Ordering reacts to Payments events.

PaymentCompleted moves the order to Paid through the MarkOrderPaid command,
so a callback and a direct call behave the same way. Redelivered events
are harmless because a Paid order stays Paid. A payment for an order that
is not awaiting one (Draft, Completed, Canceled) or no longer exists is
logged and dropped.
"""

import structlog
from protean.exceptions import InvalidOperationError, ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.payments import PaymentCompleted

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.order.payment import MarkOrderPaid

logger = structlog.get_logger(__name__)

# Register external events so Protean can deserialize them
ordering.register_external_event(PaymentCompleted, "Payments.PaymentCompleted.v1")


@ordering.event_handler(part_of=Order, stream_category="payments::payment")
class PaymentOrderEventHandler:
    @handle(PaymentCompleted)
    def on_payment_completed(self, event: PaymentCompleted) -> None:
        logger.info(
            "Payment completed for order",
            order_id=str(event.order_id),
            payment_id=str(event.payment_id),
            amount=event.amount,
        )
        try:
            current_domain.process(MarkOrderPaid(order_id=str(event.order_id)), asynchronous=False)
        except ObjectNotFoundError:
            logger.warning(
                "Payment completed for an unknown order",
                order_id=str(event.order_id),
                payment_id=str(event.payment_id),
            )
        except InvalidOperationError as exc:
            logger.warning(
                "Payment completed for an order that cannot be paid",
                order_id=str(event.order_id),
                payment_id=str(event.payment_id),
                reason=str(exc),
            )
