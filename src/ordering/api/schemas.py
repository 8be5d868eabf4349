"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class DraftItemSchema(BaseModel):
    product_id: str
    product_name_snapshot: str
    product_name_snapshot_localized: str | None = None
    unit_price_snapshot: float = Field(ge=0)
    quantity: int


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateDraftOrderRequest(BaseModel):
    user_id: str
    items: list[DraftItemSchema]
    total_amount: float | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "user-001",
                    "items": [
                        {
                            "product_id": "prod-001",
                            "product_name_snapshot": "Margherita",
                            "unit_price_snapshot": 100.0,
                            "quantity": 2,
                        }
                    ],
                    "total_amount": 200.0,
                }
            ]
        }
    }


class ConfirmOrderRequest(BaseModel):
    contact_name: str
    contact_phone: str
    contact_email: str | None = None
    notes: str | None = None
    payment_type: str  # OnPickup, Online


class UpdateOrderRequest(BaseModel):
    status: str | None = None
    notes: str | None = None
    total_amount: float | None = Field(default=None, ge=0)
    payment_type: str | None = None


class CorrectItemQuantityRequest(BaseModel):
    quantity: int


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    id: str
    order_id: str | None = None
    product_id: str
    product_name_snapshot: str
    product_name_snapshot_localized: str | None = None
    unit_price_snapshot: float
    quantity: int
    line_total: float
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderResponse(BaseModel):
    id: str
    user_id: str
    status: str
    total_amount: float
    contact_name: str | None = None
    contact_phone: str | None = None
    contact_email: str | None = None
    notes: str | None = None
    payment_type: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    items: list[OrderItemResponse] = []


class OrderPageResponse(BaseModel):
    items: list[OrderResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool


class StatusResponse(BaseModel):
    status: str = "ok"
