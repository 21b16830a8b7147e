"""Storefront bounded context: Checkout, Inventory Ledger and Order lifecycle.

Converts a shopping cart or a guest item list into a priced, stock-reserved
order, and drives orders through their status lifecycle (cancellation
restores the stock that checkout reserved).
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging

configure_logging()

storefront = Domain(name="storefront")
