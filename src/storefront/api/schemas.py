"""Pydantic request/response schemas for the Storefront API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

ORDER_STATUS_PATTERN = "^(PENDING|PAID|SHIPPED|COMPLETED|CANCELED)$"

# --- Request Schemas ---


class ShippingRequest(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=80)
    phone: str = Field(..., min_length=6, max_length=30)
    address_line1: str = Field(..., min_length=3, max_length=120)
    city: str = Field(..., min_length=2, max_length=80)
    notes: str | None = Field(None, max_length=500)


class CheckoutRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping": {
                        "full_name": "Amira Ben Salah",
                        "phone": "+216 20 123 456",
                        "address_line1": "12 Rue de Marseille",
                        "city": "Tunis",
                        "notes": "Call before delivery",
                    }
                }
            ]
        }
    }

    shipping: ShippingRequest


class GuestItemRequest(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1, le=99)


class GuestCheckoutRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "0b6c1e0e-7d1a-4c55-9a57-2f1f7b0d3c11", "quantity": 2}],
                    "shipping": {
                        "full_name": "Amira Ben Salah",
                        "phone": "+216 20 123 456",
                        "address_line1": "12 Rue de Marseille",
                        "city": "Tunis",
                    },
                }
            ]
        }
    }

    items: list[GuestItemRequest] = Field(..., min_length=1, max_length=100)
    shipping: ShippingRequest


class OrderStatusRequest(BaseModel):
    status: str = Field(..., pattern=ORDER_STATUS_PATTERN)


class AddCartItemRequest(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1, le=99)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(..., ge=1, le=99)


# --- Response Schemas ---


class OrderSummary(BaseModel):
    id: str
    status: str
    total_cents: int
    currency: str
    created_at: datetime | None = None


class CheckoutResponse(BaseModel):
    order: OrderSummary


class OrderLineResponse(BaseModel):
    id: str
    product_id: str | None = None
    product_name: str
    unit_price_cents: int
    quantity: int
    line_total_cents: int


class PaymentResponse(BaseModel):
    method: str
    status: str
    amount_cents: int


class ShippingResponse(BaseModel):
    full_name: str
    phone: str
    address_line1: str
    city: str
    notes: str | None = None


class OrderDetail(BaseModel):
    id: str
    user_id: str | None = None
    status: str
    currency: str
    subtotal_cents: int
    discount_cents: int
    shipping_cents: int
    total_cents: int
    shipping: ShippingResponse | None = None
    lines: list[OrderLineResponse] = []
    payment: PaymentResponse | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderDetailResponse(BaseModel):
    order: OrderDetail


class OrderPageResponse(BaseModel):
    items: list[OrderSummary]
    page: int
    limit: int
    total: int


class AdminOrderSummary(OrderSummary):
    user_id: str | None = None
    shipping: ShippingResponse | None = None


class AdminOrderPageResponse(BaseModel):
    items: list[AdminOrderSummary]
    page: int
    limit: int
    total: int
    total_pages: int


class CartProduct(BaseModel):
    id: str
    name: str
    price_cents: int
    unit_price_cents: int
    stock: int
    is_active: bool


class CartItemResponse(BaseModel):
    id: str
    product_id: str
    quantity: int
    product: CartProduct | None = None


class CartResponse(BaseModel):
    id: str | None = None
    items: list[CartItemResponse] = []
    subtotal_cents: int = 0


class CartItemChangedResponse(BaseModel):
    id: str
    quantity: int


class ClearCartResponse(BaseModel):
    removed: int
