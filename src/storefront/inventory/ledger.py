"""Inventory Ledger: the only code path that mutates product stock.

Both operations load the ``Product`` aggregate, apply the guarded change and
save it back. The save carries the version the product was read at, so of two
units of work that both took the last unit only the first to commit keeps
it; the other fails with ``ExpectedVersionError``. Inside a command handler
Protean re-runs the handler in a fresh unit of work, where the re-read stock
makes the loser fail with ``OutOfStock``. Outside a unit of work every save
commits on its own, so the ledger re-reads and re-checks here instead.

``release`` is the compensating increment used on cancellation and never
fails for a product that no longer exists.
"""

import structlog
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from storefront.errors import NotFound, PersistenceFailure
from storefront.product.product import Product

logger = structlog.get_logger(__name__)

MAX_WRITE_ATTEMPTS = 5


class InventoryLedger:
    def __init__(self, products=None):
        self._products = products or current_domain.repository_for(Product)

    def reserve(self, product_id, quantity: int) -> int:
        """Decrement stock by ``quantity``. Returns the remaining stock."""
        if quantity <= 0:
            raise ValueError("Quantity must be positive")

        for _ in range(MAX_WRITE_ATTEMPTS):
            product = self._products.get_or_none(product_id)
            if product is None or not product.is_active:
                raise NotFound("Product not found", product_id=str(product_id))

            product.reserve(quantity)
            try:
                self._products.add(product)
            except ExpectedVersionError:
                logger.debug("Stock changed during reservation, retrying", product_id=str(product_id))
                continue

            logger.info(
                "Stock reserved",
                product_id=str(product_id),
                quantity=quantity,
                remaining=product.stock,
            )
            return product.stock

        raise PersistenceFailure("Stock is changing too quickly, try again", product_id=str(product_id))

    def release(self, product_id, quantity: int) -> int | None:
        """Increment stock by ``quantity``. Returns the new stock, or None if the product is gone."""
        if quantity <= 0:
            raise ValueError("Quantity must be positive")

        for _ in range(MAX_WRITE_ATTEMPTS):
            product = self._products.get_or_none(product_id)
            if product is None:
                logger.warning(
                    "Cannot restore stock for a deleted product",
                    product_id=str(product_id),
                    quantity=quantity,
                )
                return None

            product.release(quantity)
            try:
                self._products.add(product)
            except ExpectedVersionError:
                continue

            logger.info(
                "Stock released",
                product_id=str(product_id),
                quantity=quantity,
                stock=product.stock,
            )
            return product.stock

        raise PersistenceFailure("Stock is changing too quickly, try again", product_id=str(product_id))
