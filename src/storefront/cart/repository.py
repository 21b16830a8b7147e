"""Repository for the ShoppingCart aggregate."""

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront


@storefront.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def find_for_user(self, user_id) -> ShoppingCart | None:
        """The user's cart, or None if they never had one."""
        carts = self._dao.query.filter(user_id=user_id).all().items
        return carts[0] if carts else None

    def get_or_create_for_user(self, user_id) -> ShoppingCart:
        cart = self.find_for_user(user_id)
        if cart is None:
            cart = ShoppingCart.create(user_id=user_id)
        return cart
