"""Store settings: the storefront-wide shipping fee and discount.

Admin tooling owns the singleton row. Checkout reads it once into an
immutable ``CheckoutSettings`` snapshot so pricing never depends on ambient
mutable state.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Integer
from protean.utils.globals import current_domain

from storefront.domain import storefront

SINGLETON_ID = "singleton"


@storefront.aggregate
class StoreSettings:
    shipping_cents = Integer(default=0, min_value=0)
    discount_percent = Float(default=0.0)
    updated_at = DateTime()


@dataclass(frozen=True)
class CheckoutSettings:
    """Settings snapshot used for one checkout."""

    shipping_cents: int = 0
    discount_percent: float = 0.0


def load_checkout_settings() -> CheckoutSettings:
    """Read the current settings; a missing row means no shipping fee and no discount."""
    try:
        settings = current_domain.repository_for(StoreSettings).get(SINGLETON_ID)
    except ObjectNotFoundError:
        return CheckoutSettings()

    return CheckoutSettings(
        shipping_cents=settings.shipping_cents or 0,
        discount_percent=settings.discount_percent or 0.0,
    )
