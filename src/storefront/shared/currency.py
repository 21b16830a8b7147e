"""Deployment currency.

The storefront trades in a single currency, configured once per deployment
through ``STOREFRONT_CURRENCY``.
"""

import os

VALID_CURRENCIES = frozenset(
    {
        "USD",
        "EUR",
        "GBP",
        "CAD",
        "CHF",
        "MAD",
        "DZD",
        "TND",
        "EGP",
        "SAR",
        "AED",
    }
)

DEFAULT_CURRENCY = "TND"


def deployment_currency() -> str:
    """Return the configured ISO 4217 code, rejecting anything unsupported."""
    currency = os.getenv("STOREFRONT_CURRENCY", DEFAULT_CURRENCY).upper()
    if currency not in VALID_CURRENCIES:
        raise ValueError(f"Unsupported currency: {currency}")
    return currency
