"""Product aggregate: the catalogue's product as seen by checkout.

The catalogue owns products; this context reads their price, discount and
active flag, and mutates only ``stock``, through ``reserve`` and ``release``
called by the Inventory Ledger. Every stock change is a versioned aggregate
save, so overlapping writers of the same product cannot both commit.
"""

from protean.fields import Boolean, DateTime, Float, Integer, String, ValueObject

from storefront.domain import storefront
from storefront.errors import OutOfStock
from storefront.shared.pricing import DiscountKind


@storefront.value_object(part_of="Product")
class Discount:
    """Product-level discount: a percentage of the price, or a fixed amount in major units."""

    kind = String(required=True, choices=DiscountKind)
    value = Float(required=True)


@storefront.aggregate
class Product:
    name = String(required=True, max_length=255)
    slug = String(max_length=255)
    price_cents = Integer(required=True, min_value=0)
    stock = Integer(default=0, min_value=0)
    discount = ValueObject(Discount)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    def can_supply(self, quantity):
        return bool(self.is_active) and self.stock >= quantity

    def reserve(self, quantity):
        """Take ``quantity`` units out of stock."""
        if quantity <= 0:
            raise ValueError("Quantity must be positive")
        if self.stock < quantity:
            raise OutOfStock(
                "Out of stock",
                product_id=str(self.id),
                available=self.stock,
                requested=quantity,
            )
        self.stock -= quantity

    def release(self, quantity):
        """Put ``quantity`` units back into stock."""
        if quantity <= 0:
            raise ValueError("Quantity must be positive")
        self.stock += quantity
