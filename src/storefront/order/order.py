"""Order aggregate: a priced, stock-reserved purchase.

Money fields are computed once at checkout and never change afterwards.
Line items and the shipping address are snapshots: they copy what the
customer saw at checkout time instead of referencing live products or
addresses, so historical orders stay stable.

State Machine:
    PENDING → PAID → SHIPPED → COMPLETED
    CANCELED (from PENDING, PAID, SHIPPED)

Entering PAID marks the payment PAID; entering CANCELED marks it FAILED (the
stock release is carried out by the status command handler).
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.domain import storefront
from storefront.errors import InvalidTransition
from storefront.order.events import OrderCanceled, OrderPlaced, OrderStatusChanged
from storefront.shared.pricing import order_total_cents


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    SHIPPED = "SHIPPED"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"


CASH_ON_DELIVERY = "COD"

# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELED},
    OrderStatus.PAID: {OrderStatus.SHIPPED, OrderStatus.CANCELED},
    OrderStatus.SHIPPED: {OrderStatus.COMPLETED, OrderStatus.CANCELED},
    OrderStatus.COMPLETED: set(),  # Terminal
    OrderStatus.CANCELED: set(),  # Terminal
}


def allowed_transitions(status):
    return _VALID_TRANSITIONS.get(OrderStatus(status), set())


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingSnapshot:
    """Where the order ships, copied from the checkout form."""

    full_name = String(required=True, max_length=80)
    phone = String(required=True, max_length=30)
    address_line1 = String(required=True, max_length=120)
    city = String(required=True, max_length=80)
    notes = Text()


@storefront.value_object(part_of="Order")
class Payment:
    """Local payment record; there is no gateway behind it."""

    method = String(max_length=20, default=CASH_ON_DELIVERY)
    status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    amount_cents = Integer(required=True, min_value=0)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderLine:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    unit_price_cents = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    line_total_cents = Integer(required=True, min_value=0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    user_id = Identifier()  # None for guest checkouts
    currency = String(required=True, max_length=3)
    subtotal_cents = Integer(required=True, min_value=0)
    discount_cents = Integer(default=0, min_value=0)
    shipping_cents = Integer(default=0, min_value=0)
    total_cents = Integer(required=True, min_value=0)
    shipping = ValueObject(ShippingSnapshot)
    lines = HasMany(OrderLine)
    payment = ValueObject(Payment)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_reconcile_with_components(self):
        expected = order_total_cents(self.subtotal_cents, self.discount_cents or 0, self.shipping_cents or 0)
        if self.total_cents != expected:
            raise ValidationError({"total_cents": [f"Total {self.total_cents} does not reconcile, expected {expected}"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        user_id,
        shipping,
        lines_data,
        subtotal_cents,
        discount_cents,
        shipping_cents,
        total_cents,
        currency,
    ):
        """Create a PENDING order with a PENDING cash-on-delivery payment.

        Args:
            user_id: Owning user, or None for a guest checkout.
            shipping: Dict with full_name, phone, address_line1, city, notes.
            lines_data: List of dicts with product_id, product_name,
                        unit_price_cents, quantity, line_total_cents.
            subtotal_cents, discount_cents, shipping_cents, total_cents:
                        Money fields, already computed by the pricing calculator.
            currency: Three-letter deployment currency.
        """
        for line in lines_data:
            if line["line_total_cents"] != line["unit_price_cents"] * line["quantity"]:
                raise ValidationError({"lines": [f"Line total for {line['product_id']} does not reconcile"]})
        if subtotal_cents != sum(line["line_total_cents"] for line in lines_data):
            raise ValidationError({"subtotal_cents": ["Subtotal must equal the sum of line totals"]})

        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            currency=currency,
            subtotal_cents=subtotal_cents,
            discount_cents=discount_cents,
            shipping_cents=shipping_cents,
            total_cents=total_cents,
            shipping=ShippingSnapshot(**shipping),
            lines=[OrderLine(**line) for line in lines_data],
            payment=Payment(
                method=CASH_ON_DELIVERY,
                status=PaymentStatus.PENDING.value,
                amount_cents=total_cents,
            ),
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id) if user_id else None,
                line_count=len(lines_data),
                subtotal_cents=subtotal_cents,
                discount_cents=discount_cents,
                shipping_cents=shipping_cents,
                total_cents=total_cents,
                currency=currency,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransition(
                f"Cannot change order status from {current.value} to {target_status.value}",
                order_id=str(self.id),
            )

    def _set_payment_status(self, payment_status):
        self.payment = Payment(
            method=self.payment.method if self.payment else CASH_ON_DELIVERY,
            status=payment_status.value,
            amount_cents=self.payment.amount_cents if self.payment else self.total_cents,
        )

    def transition_to(self, target_status):
        """Move to ``target_status`` and apply the payment side of the transition.

        Returns the previous status. Stock restoration on cancellation is the
        caller's job: it needs the Inventory Ledger and the unit of work.
        """
        target_status = OrderStatus(target_status)
        self._assert_can_transition(target_status)

        previous = OrderStatus(self.status)
        if target_status == OrderStatus.CANCELED:
            self._set_payment_status(PaymentStatus.FAILED)
        elif target_status == OrderStatus.PAID:
            self._set_payment_status(PaymentStatus.PAID)

        now = datetime.now(UTC)
        self.status = target_status.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous.value,
                new_status=target_status.value,
                payment_status=self.payment.status,
                changed_at=now,
            )
        )
        if target_status == OrderStatus.CANCELED:
            self.raise_(
                OrderCanceled(
                    order_id=str(self.id),
                    previous_status=previous.value,
                    canceled_at=now,
                )
            )
        return previous

    def mark_paid(self):
        return self.transition_to(OrderStatus.PAID)

    def ship(self):
        return self.transition_to(OrderStatus.SHIPPED)

    def complete(self):
        return self.transition_to(OrderStatus.COMPLETED)

    def cancel(self):
        return self.transition_to(OrderStatus.CANCELED)
