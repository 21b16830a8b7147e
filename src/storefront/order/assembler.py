"""Order Assembler: turns line requests into a priced, unsaved order draft.

The stock check here is advisory: it gives an early, friendly failure before
any transaction starts. The Checkout Coordinator repeats the check
authoritatively while reserving stock.

Repeated product ids are not merged; every request becomes its own line,
exactly as a cart (one line per product) would produce.
"""

from dataclasses import dataclass
from enum import Enum

import structlog
from protean.utils.globals import current_domain

from storefront.errors import EmptyCart, OutOfStock
from storefront.product.product import Product
from storefront.shared.pricing import line_total_cents, unit_price_cents

logger = structlog.get_logger(__name__)


class CheckoutSource(Enum):
    CART = "Cart"
    ITEMS = "Items"


@dataclass(frozen=True)
class LineRequest:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class DraftLine:
    product_id: str
    product_name: str
    unit_price_cents: int
    quantity: int
    line_total_cents: int

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "unit_price_cents": self.unit_price_cents,
            "quantity": self.quantity,
            "line_total_cents": self.line_total_cents,
        }


@dataclass(frozen=True)
class OrderDraft:
    shipping: dict
    lines: tuple[DraftLine, ...]
    subtotal_cents: int
    source: CheckoutSource
    user_id: str | None = None
    cart_id: str | None = None


def lines_from_cart(cart) -> list[LineRequest]:
    return [LineRequest(product_id=str(item.product_id), quantity=item.quantity) for item in cart.items]


def price_line(product, quantity) -> DraftLine:
    unit_price = unit_price_cents(product)
    return DraftLine(
        product_id=str(product.id),
        product_name=product.name,
        unit_price_cents=unit_price,
        quantity=quantity,
        line_total_cents=line_total_cents(unit_price, quantity),
    )


def assemble(shipping, line_requests, source, user_id=None, cart_id=None) -> OrderDraft:
    """Resolve products, price every line and total the subtotal.

    Raises:
        EmptyCart: no line requests were given.
        NotFound: a product is missing or inactive.
        OutOfStock: a product has less stock than requested (advisory).
    """
    if not line_requests:
        raise EmptyCart("Cart is empty")

    products = current_domain.repository_for(Product)
    lines = []
    for request in line_requests:
        product = products.get_active(request.product_id)
        if product.stock < request.quantity:
            raise OutOfStock(
                "Out of stock",
                product_id=str(request.product_id),
                available=product.stock,
                requested=request.quantity,
            )
        lines.append(price_line(product, request.quantity))

    subtotal = sum(line.line_total_cents for line in lines)
    logger.debug("Order draft assembled", source=source.value, lines=len(lines), subtotal_cents=subtotal)

    return OrderDraft(
        shipping=dict(shipping),
        lines=tuple(lines),
        subtotal_cents=subtotal,
        source=source,
        user_id=str(user_id) if user_id else None,
        cart_id=str(cart_id) if cart_id else None,
    )
