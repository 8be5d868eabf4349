"""Application tests for order item lookups and CorrectItemQuantity."""

import pytest
from ordering.order.items import CorrectItemQuantity, get_item, list_items_by_order
from ordering.order.order import Order
from protean import current_domain
from protean.exceptions import ObjectNotFoundError


def _correct(item_id, quantity):
    return current_domain.process(CorrectItemQuantity(item_id=item_id, new_quantity=quantity), asynchronous=False)


class TestItemLookups:
    def test_list_in_creation_order(self, draft_order_id):
        items = list_items_by_order(draft_order_id)
        assert [str(i.product_id) for i in items] == ["prod-001", "prod-002"]

    def test_list_for_missing_order(self):
        with pytest.raises(ObjectNotFoundError):
            list_items_by_order("does-not-exist")

    def test_get_item(self, draft_order_id):
        first = list_items_by_order(draft_order_id)[0]
        item = get_item(first.id)
        assert item is not None
        assert item.product_name_snapshot == "Margherita"

    def test_get_missing_item(self):
        assert get_item("does-not-exist") is None


class TestCorrectItemQuantity:
    def test_quantity_persisted(self, draft_order_id):
        item = list_items_by_order(draft_order_id)[0]

        _correct(str(item.id), 7)

        assert get_item(item.id).quantity == 7

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_no_lower_bound(self, draft_order_id, quantity):
        item = list_items_by_order(draft_order_id)[0]

        _correct(str(item.id), quantity)

        assert get_item(item.id).quantity == quantity

    def test_total_amount_unchanged(self, draft_order_id):
        item = list_items_by_order(draft_order_id)[0]

        _correct(str(item.id), 0)

        assert current_domain.repository_for(Order).get(draft_order_id).total_amount == 350.0

    def test_works_in_any_status(self, draft_order_id, confirm_as):
        confirm_as(draft_order_id)
        item = list_items_by_order(draft_order_id)[1]

        _correct(str(item.id), 3)

        assert get_item(item.id).quantity == 3

    def test_missing_item(self):
        with pytest.raises(ObjectNotFoundError):
            _correct("does-not-exist", 1)
