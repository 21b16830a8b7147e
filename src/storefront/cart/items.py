"""Cart item management: commands and handler.

Quantities are checked against live stock when they change; the check is
advisory, checkout re-validates inside its own transaction.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront
from storefront.errors import NotFound, OutOfStock
from storefront.product.product import Product


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1, max_value=99)


@storefront.command(part_of="ShoppingCart")
class UpdateCartItemQuantity:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1, max_value=99)


@storefront.command(part_of="ShoppingCart")
class RemoveCartItem:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class ClearCart:
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=ShoppingCart)
class CartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).get_active(command.product_id)

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_or_create_for_user(command.user_id)

        if cart.quantity_after_adding(command.product_id, command.quantity) > product.stock:
            raise OutOfStock("Out of stock", product_id=str(command.product_id))

        item = cart.add_item(command.product_id, command.quantity)
        repo.add(cart)
        return {"id": str(item.id), "quantity": item.quantity}

    @handle(UpdateCartItemQuantity)
    def update_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_for_user(command.user_id)
        if cart is None:
            raise NotFound("Cart item not found", item_id=str(command.item_id))

        item = cart.find_item(command.item_id)
        product = current_domain.repository_for(Product).get_active(item.product_id)
        if command.quantity > product.stock:
            raise OutOfStock("Out of stock", product_id=str(item.product_id))

        cart.update_item_quantity(command.item_id, command.quantity)
        repo.add(cart)
        return {"id": str(item.id), "quantity": command.quantity}

    @handle(RemoveCartItem)
    def remove_item(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_for_user(command.user_id)
        if cart is None:
            raise NotFound("Cart item not found", item_id=str(command.item_id))

        cart.remove_item(command.item_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_for_user(command.user_id)
        if cart is None:
            return 0

        removed = cart.clear()
        repo.add(cart)
        return removed
