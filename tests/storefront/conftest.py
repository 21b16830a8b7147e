import os

import pytest


@pytest.fixture(scope="session")
def _storefront_domain(request):
    """Initialize the storefront domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from storefront.domain import storefront

    storefront.init()
    return storefront


@pytest.fixture(scope="session", autouse=True)
def setup_db(_storefront_domain):
    from storefront.utils.db import drop_db, setup_db

    setup_db(_storefront_domain)

    yield

    drop_db(_storefront_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_storefront_domain, monkeypatch):
    """Push domain context before each test, cleanup after."""
    monkeypatch.delenv("STOREFRONT_CURRENCY", raising=False)
    ctx = _storefront_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def shipping():
    return {
        "full_name": "Amira Ben Salah",
        "phone": "+216 20 123 456",
        "address_line1": "12 Rue de Marseille",
        "city": "Tunis",
        "notes": "Call before delivery",
    }


@pytest.fixture()
def make_product():
    """Persist a product and return it."""
    from protean import current_domain
    from storefront.product.product import Discount, Product

    def _make(name="Olive Oil 1L", price_cents=1000, stock=10, discount=None, is_active=True):
        product = Product(
            name=name,
            price_cents=price_cents,
            stock=stock,
            discount=Discount(kind=discount[0], value=discount[1]) if discount else None,
            is_active=is_active,
        )
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def store_settings():
    """Persist the store settings singleton."""
    from protean import current_domain
    from storefront.settings.store_settings import SINGLETON_ID, StoreSettings

    def _configure(shipping_cents=0, discount_percent=0.0):
        settings = StoreSettings(id=SINGLETON_ID, shipping_cents=shipping_cents, discount_percent=discount_percent)
        current_domain.repository_for(StoreSettings).add(settings)
        return settings

    return _configure


@pytest.fixture()
def stock_of():
    from protean import current_domain
    from storefront.product.product import Product

    def _stock(product_id):
        return current_domain.repository_for(Product).get(product_id).stock

    return _stock


@pytest.fixture()
def order_count():
    from protean import current_domain
    from storefront.order.order import Order

    def _count():
        return len(current_domain.repository_for(Order)._dao.query.all().items)

    return _count
