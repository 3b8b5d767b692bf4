"""Pydantic request/response schemas for the storefront session API.

These are external contracts, kept separate from the cart, flow and order
objects they are built from. Money leaves the API as a string with two
decimals, the way the storefront displays it.
"""

from pydantic import BaseModel, Field

NOT_SIGNED_IN = "Not signed in"


def format_money(amount: float) -> str:
    return f"{amount:.2f}"


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class AddCartItemRequest(BaseModel):
    product_id: int
    name: str = Field("", max_length=255)
    unit_price: float = Field(ge=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": 7,
                    "name": "Ceramic Mug",
                    "unit_price": 12.5,
                }
            ]
        }
    }


class ConfirmOrderRequest(BaseModel):
    full_name: str
    email: str
    shipping_address: str = ""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "full_name": "Ada Lovelace",
                    "email": "ada@example.com",
                    "shipping_address": "12 St James's Square, London",
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartLineResponse(BaseModel):
    product_id: int
    name: str
    unit_price: str
    quantity: int
    line_total: str


class CartResponse(BaseModel):
    lines: list[CartLineResponse]
    total_items: int
    total_price: str


class SessionResponse(BaseModel):
    session_id: str
    user_id: str | None = None
    identity: str
    flow_state: str
    total_items: int
    total_price: str


class OrderSummaryResponse(BaseModel):
    full_name: str
    email: str
    shipping_address: str
    total: str


class ConfirmationResponse(BaseModel):
    flow_state: str
    persisted: bool
    order_id: str | None = None
    error: str | None = None
    summary: OrderSummaryResponse


class OrderedItemResponse(BaseModel):
    product_id: int
    name: str
    unit_price: str
    quantity: int
    line_total: str


class OrderResponse(BaseModel):
    order_id: str
    created_at: str
    order_total: str
    items: list[OrderedItemResponse]


class HistoryResponse(BaseModel):
    status: str
    identity: str
    orders: list[OrderResponse] = []
    message: str | None = None


class SignOutResponse(BaseModel):
    user_id: str | None = None
    identity: str


class StatusResponse(BaseModel):
    status: str = "ok"
