"""Checkout: commands, handler and the Checkout Transaction Coordinator.

Flow (one unit of work per command):
    1. Assemble a priced draft from the cart or the explicit item list
    2. Reserve stock for every line (authoritative availability check)
    3. Read the store settings snapshot, compute discount and total
    4. Persist the Order with its lines and a PENDING cash-on-delivery payment
    5. Clear the cart when the checkout came from one

Any failure aborts the unit of work, so stock, cart and orders are left as
they were.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront
from storefront.errors import EmptyCart, StorefrontError
from storefront.inventory.ledger import InventoryLedger
from storefront.order.assembler import CheckoutSource, LineRequest, assemble, lines_from_cart
from storefront.order.order import Order
from storefront.settings.store_settings import load_checkout_settings
from storefront.shared.currency import deployment_currency
from storefront.shared.pricing import order_discount_cents, order_total_cents

logger = structlog.get_logger(__name__)


class CheckoutCoordinator:
    """Reserves stock and writes the order. Must run inside a unit of work.

    Stock already reserved is handed back whenever a later step fails, in
    the same unit of work that the failure then aborts.
    """

    def __init__(self, ledger=None, currency=None):
        self.ledger = ledger or InventoryLedger()
        self.currency = currency or deployment_currency()

    def checkout(self, draft, settings=None) -> Order:
        self._reserve_all(draft.lines)
        try:
            order = self._write_order(draft, settings or load_checkout_settings())
        except Exception:
            self._release_all(draft.lines)
            raise

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=draft.user_id,
            source=draft.source.value,
            lines=len(draft.lines),
            total_cents=order.total_cents,
        )
        return order

    def _write_order(self, draft, settings) -> Order:
        discount = order_discount_cents(draft.subtotal_cents, settings.discount_percent)
        total = order_total_cents(draft.subtotal_cents, discount, settings.shipping_cents)

        order = Order.create(
            user_id=draft.user_id,
            shipping=draft.shipping,
            lines_data=[line.to_dict() for line in draft.lines],
            subtotal_cents=draft.subtotal_cents,
            discount_cents=discount,
            shipping_cents=settings.shipping_cents,
            total_cents=total,
            currency=self.currency,
        )
        current_domain.repository_for(Order).add(order)

        if draft.source == CheckoutSource.CART and draft.cart_id:
            carts = current_domain.repository_for(ShoppingCart)
            cart = carts.get(draft.cart_id)
            cart.clear()
            carts.add(cart)

        return order

    def _reserve_all(self, lines):
        reserved = []
        try:
            for line in lines:
                self.ledger.reserve(line.product_id, line.quantity)
                reserved.append(line)
        except StorefrontError as exc:
            logger.info(
                "Checkout aborted while reserving stock",
                error=exc.code,
                product_id=exc.details.get("product_id"),
                reserved_lines=len(reserved),
            )
            self._release_all(reserved)
            raise

    def _release_all(self, lines):
        for line in reversed(lines):
            self.ledger.release(line.product_id, line.quantity)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@storefront.command(part_of="Order")
class CheckoutCart:
    """Checkout the user's cart."""

    user_id = Identifier(required=True)
    shipping = Text(required=True)  # JSON: shipping snapshot dict


@storefront.command(part_of="Order")
class CheckoutItems:
    """Checkout an explicit item list (guest checkout when user_id is empty)."""

    user_id = Identifier()
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    shipping = Text(required=True)  # JSON: shipping snapshot dict


def _loads(value):
    return json.loads(value) if isinstance(value, str) else value


@storefront.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(CheckoutCart)
    def checkout_cart(self, command):
        cart = current_domain.repository_for(ShoppingCart).find_for_user(command.user_id)
        if cart is None or not cart.items:
            raise EmptyCart("Cart is empty")

        draft = assemble(
            shipping=_loads(command.shipping),
            line_requests=lines_from_cart(cart),
            source=CheckoutSource.CART,
            user_id=command.user_id,
            cart_id=cart.id,
        )
        order = CheckoutCoordinator().checkout(draft)
        return str(order.id)

    @handle(CheckoutItems)
    def checkout_items(self, command):
        line_requests = [
            LineRequest(product_id=str(item["product_id"]), quantity=int(item["quantity"]))
            for item in _loads(command.items)
        ]
        draft = assemble(
            shipping=_loads(command.shipping),
            line_requests=line_requests,
            source=CheckoutSource.ITEMS,
            user_id=command.user_id,
        )
        order = CheckoutCoordinator().checkout(draft)
        return str(order.id)
