"""Storefront order-processing backend: checkout, inventory consistency and order lifecycle."""
