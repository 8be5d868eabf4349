"""Domain events for the Order aggregate.

Raised by the aggregate and handled inside the ordering domain once the
unit of work that raised them has committed. Integration messages for
other services are built separately in ``ordering.publisher.messages``.
"""

from protean.fields import DateTime, Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderReleased:
    """The order was accepted: confirmed for pickup, or paid online."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    payment_type = String(required=True)
    released_at = DateTime(required=True)
