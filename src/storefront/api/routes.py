"""FastAPI endpoints for the Storefront domain.

Authentication happens upstream; the caller's identity arrives in the
``X-User-Id`` and ``X-User-Role`` headers.
"""

import json
import math

from fastapi import APIRouter, Depends, Header, Query
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    ORDER_STATUS_PATTERN,
    AddCartItemRequest,
    AdminOrderPageResponse,
    AdminOrderSummary,
    CartItemChangedResponse,
    CartItemResponse,
    CartProduct,
    CartResponse,
    CheckoutRequest,
    CheckoutResponse,
    ClearCartResponse,
    GuestCheckoutRequest,
    OrderDetail,
    OrderDetailResponse,
    OrderLineResponse,
    OrderPageResponse,
    OrderStatusRequest,
    OrderSummary,
    PaymentResponse,
    ShippingResponse,
    UpdateCartItemRequest,
)
from storefront.cart.cart import ShoppingCart
from storefront.cart.items import AddToCart, ClearCart, RemoveCartItem, UpdateCartItemQuantity
from storefront.errors import AccessDenied, NotAuthenticated
from storefront.order.checkout import CheckoutCart, CheckoutItems
from storefront.order.order import Order
from storefront.order.status import ChangeOrderStatus
from storefront.product.product import Product
from storefront.shared.commands import process
from storefront.shared.pricing import line_total_cents, unit_price_cents
from storefront.utils.pagination import parse_pagination

ADMIN_ROLE = "ADMIN"

order_router = APIRouter(prefix="/orders", tags=["orders"])
admin_router = APIRouter(prefix="/admin", tags=["admin"])
cart_router = APIRouter(prefix="/cart", tags=["cart"])


# --- Caller identity ---


def current_user_id(x_user_id: str | None = Header(None)) -> str:
    if not x_user_id:
        raise NotAuthenticated("Authentication required")
    return x_user_id


def current_role(x_user_role: str | None = Header(None)) -> str | None:
    return x_user_role.upper() if x_user_role else None


def require_admin(user_id: str = Depends(current_user_id), role: str | None = Depends(current_role)) -> str:
    if role != ADMIN_ROLE:
        raise AccessDenied("Admin access required")
    return user_id


# --- Serializers ---


def _summary(order) -> OrderSummary:
    return OrderSummary(
        id=str(order.id),
        status=order.status,
        total_cents=order.total_cents,
        currency=order.currency,
        created_at=order.created_at,
    )


def _shipping(order) -> ShippingResponse | None:
    shipping = order.shipping
    if not shipping:
        return None
    return ShippingResponse(
        full_name=shipping.full_name,
        phone=shipping.phone,
        address_line1=shipping.address_line1,
        city=shipping.city,
        notes=shipping.notes,
    )


def _admin_summary(order) -> AdminOrderSummary:
    return AdminOrderSummary(
        **_summary(order).model_dump(),
        user_id=str(order.user_id) if order.user_id else None,
        shipping=_shipping(order),
    )


def _detail(order) -> OrderDetail:
    payment = order.payment
    return OrderDetail(
        id=str(order.id),
        user_id=str(order.user_id) if order.user_id else None,
        status=order.status,
        currency=order.currency,
        subtotal_cents=order.subtotal_cents,
        discount_cents=order.discount_cents or 0,
        shipping_cents=order.shipping_cents or 0,
        total_cents=order.total_cents,
        shipping=_shipping(order),
        lines=[
            OrderLineResponse(
                id=str(line.id),
                product_id=str(line.product_id) if line.product_id else None,
                product_name=line.product_name,
                unit_price_cents=line.unit_price_cents,
                quantity=line.quantity,
                line_total_cents=line.line_total_cents,
            )
            for line in order.lines
        ],
        payment=PaymentResponse(method=payment.method, status=payment.status, amount_cents=payment.amount_cents)
        if payment
        else None,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def _cart_item(item) -> CartItemResponse:
    product = current_domain.repository_for(Product).fresh(item.product_id)
    return CartItemResponse(
        id=str(item.id),
        product_id=str(item.product_id),
        quantity=item.quantity,
        product=CartProduct(
            id=str(product.id),
            name=product.name,
            price_cents=product.price_cents,
            unit_price_cents=unit_price_cents(product),
            stock=product.stock,
            is_active=product.is_active,
        )
        if product
        else None,
    )


# --- Order endpoints ---


@order_router.post("/checkout", status_code=201, response_model=CheckoutResponse)
async def checkout_cart(body: CheckoutRequest, user_id: str = Depends(current_user_id)) -> CheckoutResponse:
    command = CheckoutCart(user_id=user_id, shipping=json.dumps(body.shipping.model_dump()))
    order_id = process(command)
    order = current_domain.repository_for(Order).get(order_id)
    return CheckoutResponse(order=_summary(order))


@order_router.post("/guest-checkout", status_code=201, response_model=CheckoutResponse)
async def guest_checkout(body: GuestCheckoutRequest) -> CheckoutResponse:
    command = CheckoutItems(
        items=json.dumps([item.model_dump() for item in body.items]),
        shipping=json.dumps(body.shipping.model_dump()),
    )
    order_id = process(command)
    order = current_domain.repository_for(Order).get(order_id)
    return CheckoutResponse(order=_summary(order))


@order_router.get("/my", response_model=OrderPageResponse)
async def my_orders(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    user_id: str = Depends(current_user_id),
) -> OrderPageResponse:
    paging = parse_pagination(page, limit)
    results = current_domain.repository_for(Order).find_for_user(user_id, offset=paging.offset, limit=paging.limit)
    return OrderPageResponse(
        items=[_summary(order) for order in results.items],
        page=paging.page,
        limit=paging.limit,
        total=results.total,
    )


@order_router.get("/public/{order_id}", response_model=OrderDetailResponse)
async def guest_order(order_id: str) -> OrderDetailResponse:
    order = current_domain.repository_for(Order).find_guest_order(order_id)
    return OrderDetailResponse(order=_detail(order))


@order_router.get("/{order_id}", response_model=OrderDetailResponse)
async def order_detail(
    order_id: str,
    user_id: str = Depends(current_user_id),
    role: str | None = Depends(current_role),
) -> OrderDetailResponse:
    order = current_domain.repository_for(Order).get_or_not_found(order_id)
    if role != ADMIN_ROLE and str(order.user_id or "") != user_id:
        raise AccessDenied("You cannot view this order")
    return OrderDetailResponse(order=_detail(order))


# --- Admin endpoints ---


@admin_router.get("/orders", response_model=AdminOrderPageResponse)
async def list_orders(
    status: str | None = Query(None, pattern=ORDER_STATUS_PATTERN),
    page: str | None = Query(None),
    limit: str | None = Query(None),
    _admin: str = Depends(require_admin),
) -> AdminOrderPageResponse:
    paging = parse_pagination(page, limit)
    results = current_domain.repository_for(Order).find_all(status, offset=paging.offset, limit=paging.limit)
    return AdminOrderPageResponse(
        items=[_admin_summary(order) for order in results.items],
        page=paging.page,
        limit=paging.limit,
        total=results.total,
        total_pages=math.ceil(results.total / paging.limit),
    )


@admin_router.get("/orders/{order_id}", response_model=OrderDetailResponse)
async def admin_order_detail(order_id: str, _admin: str = Depends(require_admin)) -> OrderDetailResponse:
    order = current_domain.repository_for(Order).get_or_not_found(order_id)
    return OrderDetailResponse(order=_detail(order))


@admin_router.patch("/orders/{order_id}", response_model=OrderDetailResponse)
async def change_order_status(
    order_id: str,
    body: OrderStatusRequest,
    _admin: str = Depends(require_admin),
) -> OrderDetailResponse:
    process(ChangeOrderStatus(order_id=order_id, status=body.status))
    order = current_domain.repository_for(Order).get(order_id)
    return OrderDetailResponse(order=_detail(order))


# --- Cart endpoints ---


@cart_router.get("", response_model=CartResponse)
async def get_cart(user_id: str = Depends(current_user_id)) -> CartResponse:
    cart = current_domain.repository_for(ShoppingCart).find_for_user(user_id)
    if cart is None:
        return CartResponse()

    items = [_cart_item(item) for item in cart.items]
    subtotal = sum(
        line_total_cents(item.product.unit_price_cents, item.quantity) for item in items if item.product is not None
    )
    return CartResponse(id=str(cart.id), items=items, subtotal_cents=subtotal)


@cart_router.post("/items", status_code=201, response_model=CartItemChangedResponse)
async def add_cart_item(body: AddCartItemRequest, user_id: str = Depends(current_user_id)) -> CartItemChangedResponse:
    result = process(AddToCart(user_id=user_id, product_id=body.product_id, quantity=body.quantity))
    return CartItemChangedResponse(**result)


@cart_router.patch("/items/{item_id}", response_model=CartItemChangedResponse)
async def update_cart_item(
    item_id: str,
    body: UpdateCartItemRequest,
    user_id: str = Depends(current_user_id),
) -> CartItemChangedResponse:
    result = process(UpdateCartItemQuantity(user_id=user_id, item_id=item_id, quantity=body.quantity))
    return CartItemChangedResponse(**result)


@cart_router.delete("/items/{item_id}", status_code=204)
async def remove_cart_item(item_id: str, user_id: str = Depends(current_user_id)) -> None:
    process(RemoveCartItem(user_id=user_id, item_id=item_id))


@cart_router.delete("/clear", response_model=ClearCartResponse)
async def clear_cart(user_id: str = Depends(current_user_id)) -> ClearCartResponse:
    removed = process(ClearCart(user_id=user_id))
    return ClearCartResponse(removed=removed or 0)
