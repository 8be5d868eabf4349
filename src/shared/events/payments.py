"""Cross-domain event contracts for Payments domain events.

The ordering domain consumes PaymentCompleted to move orders to Paid. The
class is registered as an external event via domain.register_external_event()
with a matching __type__ string so Protean's stream deserialization works.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, String


class PaymentCompleted(BaseEvent):
    """The payments service captured the money for an order."""

    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    amount = Float(required=True)
    transaction_id = String(max_length=255)
    completed_at = DateTime(required=True)
