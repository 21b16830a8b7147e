"""Repository for the Product aggregate."""

from storefront.domain import storefront
from storefront.errors import NotFound
from storefront.product.product import Product


@storefront.repository(part_of=Product)
class ProductRepository:
    def get_active(self, product_id) -> Product:
        """Load a product that can be sold; missing and inactive products are both NotFound."""
        product = self.get_or_none(product_id)
        if product is None or not product.is_active:
            raise NotFound("Product not found", product_id=str(product_id))
        return product

    def fresh(self, product_id) -> Product | None:
        """Read the current row, bypassing any aggregate cached in the unit of work."""
        items = self._dao.query.filter(id=product_id).all().items
        return items[0] if items else None
