"""Hand an accepted order over to downstream services.

An order is accepted once it is confirmed for pickup or, for online
payment, once the payment has gone through. The aggregate raises
``OrderReleased`` at that point; this handler runs after the transition
has committed, publishes one ``OrderCreated`` message and empties the
buyer's cart.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ordering.domain import ordering
from ordering.exceptions import UpstreamUnavailable
from ordering.gateways import get_cart_reader
from ordering.order.events import OrderReleased
from ordering.order.order import Order
from ordering.publisher import get_publisher

logger = structlog.get_logger(__name__)


def release_order(order) -> None:
    get_publisher().publish(order.to_order_created())

    # The status change stands even if the cart service is down
    try:
        get_cart_reader().clear_cart(str(order.user_id))
    except UpstreamUnavailable as exc:
        logger.warning(
            "Cart could not be cleared after order acceptance",
            order_id=str(order.id),
            user_id=str(order.user_id),
            reason=exc.reason,
        )
        return

    logger.info("Order released to fulfillment", order_id=str(order.id), user_id=str(order.user_id))


@ordering.event_handler(part_of=Order)
class OrderReleaseHandler:
    @handle(OrderReleased)
    def on_order_released(self, event: OrderReleased) -> None:
        order = current_domain.repository_for(Order).get_order(event.order_id)
        release_order(order)
