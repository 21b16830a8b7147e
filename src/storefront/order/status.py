"""Admin order status changes.

Cancelling an order hands every line's quantity back to the Inventory Ledger
in the same unit of work as the status write. Lines whose product has since
been deleted are skipped with a warning.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.inventory.ledger import InventoryLedger
from storefront.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)


@storefront.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_or_not_found(command.order_id)

        previous = order.transition_to(command.status)

        if order.status == OrderStatus.CANCELED.value:
            ledger = InventoryLedger()
            for line in order.lines:
                if line.product_id:
                    ledger.release(line.product_id, line.quantity)

        repo.add(order)
        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous.value,
            new_status=order.status,
        )
        return order.status
