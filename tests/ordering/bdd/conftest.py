"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.checkout.conversion import CreateOrderFromCart
from ordering.gateways.port import CartLine
from ordering.order.order import Order
from ordering.publisher.messages import OrderCreated
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def outcome():
    """What the last When step produced: an order id or the raised error."""
    return {"order_id": None, "error": None}


# ---------------------------------------------------------------------------
# Given steps: collaborators
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the catalog offers "{product_id}" at {price:f}'))
def _(catalog_service, product_id, price):
    catalog_service.put_product(product_id, f"Product {product_id}", price)


@given(parsers.cfparse('the catalog lists "{product_id}" as unavailable'))
def _(catalog_service, product_id):
    catalog_service.put_product(product_id, f"Product {product_id}", 1.0, is_available=False)


@given(parsers.cfparse('the buyer has {quantity:d} of "{product_id}" in the cart'))
def _(cart_service, buyer, quantity, product_id):
    cart_service.carts.setdefault(buyer, []).append(CartLine(product_id=product_id, quantity=quantity))


@given("the buyer's profile has no phone number")
def _(profile_service, buyer):
    profile_service.put_user(buyer, phone_number=None)


@given("a Draft order from the buyer's cart", target_fixture="order_id")
def _(catalog_service, cart_service, buyer):
    catalog_service.put_product("P1", "Margherita", 100.0)
    cart_service.put_items(buyer, [("P1", 2)])
    return current_domain.process(CreateOrderFromCart(user_id=buyer), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps: shared assertions
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).status == status


@then(parsers.cfparse("{count:d} order-created message is published"))
def _(publisher, count):
    assert len(publisher.of_type(OrderCreated)) == count


@then("the buyer's cart is cleared")
def _(cart_service, buyer):
    assert cart_service.cleared_for == [buyer]


@then("the buyer's cart is not cleared")
def _(cart_service, buyer):
    assert cart_service.cleared_for == []
    assert cart_service.carts[buyer]
