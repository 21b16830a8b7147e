"""Pricing calculator: pure functions over integer minor-currency units.

Money is always an ``int`` number of cents. Floats appear only as the
intermediate of a percentage multiplication, which is rounded half away from
zero with the same rule for product-level and order-level discounts so that
line totals and order totals reconcile deterministically.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

MAX_DISCOUNT_PERCENT = 90


class DiscountKind(Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer; ties go away from zero (2.5 -> 3, -2.5 -> -3)."""
    # Decimal(float) is exact, so values just below a tie are not pushed over it
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def clamp(value, lower, upper):
    return max(lower, min(upper, value))


def _is_usable(value) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def unit_price_cents(product) -> int:
    """Price of one unit after the product's own discount.

    ``product`` exposes ``price_cents`` and an optional ``discount`` with
    ``kind`` and ``value``. FIXED values are expressed in major units.
    """
    base = product.price_cents
    discount = product.discount
    if discount is None or not _is_usable(discount.value):
        return base

    if discount.kind == DiscountKind.FIXED.value:
        return max(0, base - round_half_away_from_zero(discount.value * 100))

    if discount.kind == DiscountKind.PERCENTAGE.value:
        pct = clamp(discount.value, 0, MAX_DISCOUNT_PERCENT)
        return max(0, base - round_half_away_from_zero(base * pct / 100))

    return base


def line_total_cents(unit_price: int, quantity: int) -> int:
    return unit_price * quantity


def order_discount_cents(subtotal: int, store_percent) -> int:
    """Storefront-wide discount on the order subtotal."""
    if not _is_usable(store_percent):
        return 0
    pct = clamp(math.trunc(store_percent), 0, MAX_DISCOUNT_PERCENT)
    cents = round_half_away_from_zero(subtotal * pct / 100)
    return clamp(cents, 0, subtotal)


def order_total_cents(subtotal: int, discount: int, shipping: int) -> int:
    return max(0, subtotal - discount + shipping)
