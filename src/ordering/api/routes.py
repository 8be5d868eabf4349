"""FastAPI routes for the Ordering domain — orders and order items.

The caller's identity arrives in ``X-User-Id``; administrative routes also
need ``X-User-Role`` set to Admin or Manager. Authentication itself
happens upstream of this service.
"""

import json
from datetime import datetime

from fastapi import APIRouter, Header, HTTPException, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    ConfirmOrderRequest,
    CorrectItemQuantityRequest,
    CreateDraftOrderRequest,
    OrderItemResponse,
    OrderPageResponse,
    OrderResponse,
    StatusResponse,
    UpdateOrderRequest,
)
from ordering.checkout.conversion import CreateOrderFromCart
from ordering.order.administration import DeleteOrder, UpdateOrder
from ordering.order.confirmation import ConfirmOrder
from ordering.order.creation import CreateDraftOrder
from ordering.order.items import CorrectItemQuantity, get_item, list_items_by_order
from ordering.order.order import Order
from ordering.order.payment import MarkOrderPaid

_ADMIN_ROLES = {"Admin", "Manager"}
_PAYMENT_CALLERS = _ADMIN_ROLES | {"System"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _require_role(role: str, allowed: set[str]) -> None:
    if role not in allowed:
        raise HTTPException(status_code=403, detail="Insufficient role for this operation")


def _load_visible_order(order_id: str, user_id: str, role: str) -> Order:
    order = current_domain.repository_for(Order).get_order(order_id)
    if role not in _ADMIN_ROLES and not order.is_owned_by(user_id):
        raise HTTPException(status_code=403, detail="Order belongs to another user")
    return order


def _item_response(item) -> OrderItemResponse:
    return OrderItemResponse(
        id=str(item.id),
        order_id=str(item.order_id) if getattr(item, "order_id", None) else None,
        product_id=str(item.product_id),
        product_name_snapshot=item.product_name_snapshot,
        product_name_snapshot_localized=item.product_name_snapshot_localized,
        unit_price_snapshot=item.unit_price_snapshot,
        quantity=item.quantity,
        line_total=item.line_total,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=str(order.id),
        user_id=str(order.user_id),
        status=order.status,
        total_amount=order.total_amount,
        contact_name=order.contact_name,
        contact_phone=order.contact_phone,
        contact_email=order.contact_email,
        notes=order.notes,
        payment_type=order.payment_type,
        created_at=order.created_at,
        updated_at=order.updated_at,
        items=[_item_response(item) for item in order.sorted_items()],
    )


def _fetch(order_id: str) -> OrderResponse:
    return _order_response(current_domain.repository_for(Order).get_order(order_id))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=OrderPageResponse)
async def list_orders(
    x_user_id: str = Header(),
    x_user_role: str = Header(default=""),
    user_id: str | None = None,
    status: str | None = None,
    payment_type: str | None = None,
    min_total: float | None = None,
    max_total: float | None = None,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    order_by: str = "-created_at",
) -> OrderPageResponse:
    """List orders. Non-admin callers only ever see their own orders."""
    if x_user_role not in _ADMIN_ROLES:
        user_id = x_user_id

    result = current_domain.repository_for(Order).search(
        user_id=user_id,
        status=status,
        payment_type=payment_type,
        min_total=min_total,
        max_total=max_total,
        created_from=created_from,
        created_to=created_to,
        page=page,
        page_size=page_size,
        order_by=order_by,
    )
    return OrderPageResponse(
        items=[_order_response(order) for order in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        has_next=result.has_next,
        has_previous=result.has_previous,
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, x_user_id: str = Header(), x_user_role: str = Header(default="")) -> OrderResponse:
    return _order_response(_load_visible_order(order_id, x_user_id, x_user_role))


@order_router.post("/from-cart", status_code=201, response_model=OrderResponse)
async def create_order_from_cart(x_user_id: str = Header()) -> OrderResponse:
    """Turn the caller's cart into a Draft order. The cart is kept."""
    order_id = current_domain.process(CreateOrderFromCart(user_id=x_user_id), asynchronous=False)
    return _fetch(order_id)


@order_router.post("/draft", status_code=201, response_model=OrderResponse)
async def create_draft_order(body: CreateDraftOrderRequest, x_user_role: str = Header(default="")) -> OrderResponse:
    _require_role(x_user_role, _ADMIN_ROLES)
    command = CreateDraftOrder(
        user_id=body.user_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        total_amount=body.total_amount,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return _fetch(order_id)


@order_router.put("/{order_id}/confirm", response_model=OrderResponse)
async def confirm_order(order_id: str, body: ConfirmOrderRequest, x_user_id: str = Header()) -> OrderResponse:
    command = ConfirmOrder(
        order_id=order_id,
        caller_user_id=x_user_id,
        contact_name=body.contact_name,
        contact_phone=body.contact_phone,
        contact_email=body.contact_email,
        notes=body.notes,
        payment_type=body.payment_type,
    )
    current_domain.process(command, asynchronous=False)
    return _fetch(order_id)


@order_router.put("/{order_id}/paid", response_model=OrderResponse)
async def mark_order_paid(order_id: str, x_user_role: str = Header(default="")) -> OrderResponse:
    """Record a completed payment. Meant for the payments service and operators."""
    _require_role(x_user_role, _PAYMENT_CALLERS)
    current_domain.process(MarkOrderPaid(order_id=order_id), asynchronous=False)
    return _fetch(order_id)


@order_router.put("/{order_id}", response_model=OrderResponse)
async def update_order(order_id: str, body: UpdateOrderRequest, x_user_role: str = Header(default="")) -> OrderResponse:
    _require_role(x_user_role, _ADMIN_ROLES)
    command = UpdateOrder(
        order_id=order_id,
        status=body.status,
        notes=body.notes,
        total_amount=body.total_amount,
        payment_type=body.payment_type,
    )
    current_domain.process(command, asynchronous=False)
    return _fetch(order_id)


@order_router.delete("/{order_id}", response_model=StatusResponse)
async def delete_order(order_id: str, x_user_role: str = Header(default="")) -> StatusResponse:
    _require_role(x_user_role, _ADMIN_ROLES)
    current_domain.process(DeleteOrder(order_id=order_id), asynchronous=False)
    return StatusResponse(status="deleted")


@order_router.get("/{order_id}/items", response_model=list[OrderItemResponse])
async def get_order_items(
    order_id: str, x_user_id: str = Header(), x_user_role: str = Header(default="")
) -> list[OrderItemResponse]:
    _load_visible_order(order_id, x_user_id, x_user_role)
    return [_item_response(item) for item in list_items_by_order(order_id)]


# ---------------------------------------------------------------------------
# Order Item Router
# ---------------------------------------------------------------------------
order_item_router = APIRouter(prefix="/order-items", tags=["order-items"])


@order_item_router.get("/{item_id}", response_model=OrderItemResponse)
async def get_order_item(item_id: str, x_user_id: str = Header(), x_user_role: str = Header(default="")) -> OrderItemResponse:
    item = get_item(item_id)
    if item is None:
        raise ObjectNotFoundError(f"Order item with ID '{item_id}' not found.")
    _load_visible_order(item.order_id, x_user_id, x_user_role)
    return _item_response(item)


@order_item_router.put("/{item_id}/quantity", response_model=OrderItemResponse)
async def correct_item_quantity(
    item_id: str, body: CorrectItemQuantityRequest, x_user_role: str = Header(default="")
) -> OrderItemResponse:
    _require_role(x_user_role, _ADMIN_ROLES)
    current_domain.process(CorrectItemQuantity(item_id=item_id, new_quantity=body.quantity), asynchronous=False)
    return _item_response(get_item(item_id))
