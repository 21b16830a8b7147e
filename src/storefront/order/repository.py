"""Repository for the Order aggregate, with the read queries the API needs."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.errors import NotFound
from storefront.order.order import Order


@storefront.repository(part_of=Order)
class OrderRepository:
    def get_or_not_found(self, order_id) -> Order:
        try:
            return self.get(order_id)
        except ObjectNotFoundError:
            raise NotFound("Order not found", order_id=str(order_id)) from None

    def find_guest_order(self, order_id) -> Order:
        """A guest order by id; orders that belong to a user are not visible here."""
        order = self.get_or_not_found(order_id)
        if order.user_id:
            raise NotFound("Order not found", order_id=str(order_id))
        return order

    def find_for_user(self, user_id, offset: int = 0, limit: int = 12):
        """A page of the user's orders, newest first. Returns a Protean ResultSet."""
        return self._dao.query.filter(user_id=user_id).order_by("-created_at").offset(offset).limit(limit).all()

    def find_all(self, status=None, offset: int = 0, limit: int = 12):
        """A page of every order, newest first, optionally narrowed to one status."""
        query = self._dao.query
        if status:
            query = query.filter(status=status)
        return query.order_by("-created_at").offset(offset).limit(limit).all()
