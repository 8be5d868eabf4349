"""Draft order creation from pre-validated item data — command and handler.

Used by administrative and test callers that already know the items; no
remote reads happen here.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CreateDraftOrder:
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of item dicts
    total_amount = Float()


def persist_draft(user_id, items_data, total_amount=None) -> Order:
    """Build a Draft order and write it in one go."""
    order = Order.create_draft(user_id=user_id, items_data=items_data, total_amount=total_amount)
    current_domain.repository_for(Order).add(order)
    logger.info(
        "Draft order created",
        order_id=str(order.id),
        user_id=str(user_id),
        item_count=len(order.items),
        total_amount=order.total_amount,
    )
    return order


@ordering.command_handler(part_of=Order)
class CreateDraftOrderHandler:
    @handle(CreateDraftOrder)
    def create_draft_order(self, command):
        items_data = command.items
        if isinstance(items_data, str):
            try:
                items_data = json.loads(items_data)
            except ValueError:
                raise ValidationError({"items": ["Items must be a JSON list"]}) from None
        if not isinstance(items_data, list) or not all(isinstance(item, dict) for item in items_data):
            raise ValidationError({"items": ["Items must be a list of objects"]})

        order = persist_draft(command.user_id, items_data, command.total_amount)
        return str(order.id)
