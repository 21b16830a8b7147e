"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """Checkout completed: stock was reserved and the order persisted."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier()  # None for guest checkouts
    line_count = Integer(required=True)
    subtotal_cents = Integer(required=True)
    discount_cents = Integer(required=True)
    shipping_cents = Integer(required=True)
    total_cents = Integer(required=True)
    currency = String(required=True, max_length=3)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """The order moved to a new status."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    payment_status = String(required=True)
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCanceled:
    """The order was canceled; its stock is being returned to inventory."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    canceled_at = DateTime(required=True)
