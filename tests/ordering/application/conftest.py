import json

import pytest
from ordering.order.confirmation import ConfirmOrder
from ordering.order.creation import CreateDraftOrder
from protean import current_domain

DEFAULT_ITEMS = [
    {
        "product_id": "prod-001",
        "product_name_snapshot": "Margherita",
        "unit_price_snapshot": 100.0,
        "quantity": 2,
    },
    {
        "product_id": "prod-002",
        "product_name_snapshot": "Quattro Formaggi",
        "unit_price_snapshot": 150.0,
        "quantity": 1,
    },
]


@pytest.fixture()
def make_draft():
    """Persist a Draft order through the command and return its id."""

    def _make(user_id="user-001", items=None, total_amount=None):
        command = CreateDraftOrder(
            user_id=user_id,
            items=json.dumps(items or DEFAULT_ITEMS),
            total_amount=total_amount,
        )
        return current_domain.process(command, asynchronous=False)

    return _make


@pytest.fixture()
def confirm_as():
    def _confirm(order_id, payment_type="OnPickup", caller="user-001"):
        command = ConfirmOrder(
            order_id=order_id,
            caller_user_id=caller,
            contact_name="Olena Koval",
            contact_phone="+380501112233",
            payment_type=payment_type,
        )
        return current_domain.process(command, asynchronous=False)

    return _confirm


@pytest.fixture()
def draft_order_id(make_draft):
    return make_draft()
