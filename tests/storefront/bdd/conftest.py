"""Shared BDD fixtures and step definitions for the Storefront domain."""

import json

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from storefront.errors import StorefrontError
from storefront.order.checkout import CheckoutItems
from storefront.order.order import Order
from storefront.order.status import ChangeOrderStatus
from storefront.product.product import Product
from storefront.shared.commands import process


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for the storefront error a step captured."""
    return {"exc": None}


@pytest.fixture()
def guest_checkout(shipping):
    """Place a guest order for one product; returns the order id."""

    def _checkout(product, quantity):
        return process(
            CheckoutItems(
                items=json.dumps([{"product_id": product.id, "quantity": quantity}]),
                shipping=json.dumps(shipping),
            )
        )

    return _checkout


@pytest.fixture()
def change_status():
    def _change(order_id, status):
        return process(ChangeOrderStatus(order_id=order_id, status=status))

    return _change


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.parse("a product priced {price:d} cents with a {percent:d} percent discount and {stock:d} in stock"),
    target_fixture="product",
)
def percentage_product(make_product, price, percent, stock):
    return make_product(price_cents=price, stock=stock, discount=("PERCENTAGE", percent))


@given(
    parsers.parse("a product priced {price:d} cents with a fixed discount of {amount:d} and {stock:d} in stock"),
    target_fixture="product",
)
def fixed_discount_product(make_product, price, amount, stock):
    return make_product(price_cents=price, stock=stock, discount=("FIXED", amount))


@given(parsers.parse("a product priced {price:d} cents with {stock:d} in stock"), target_fixture="product")
def plain_product(make_product, price, stock):
    return make_product(price_cents=price, stock=stock)


@given(parsers.parse("the store charges {shipping_cents:d} cents shipping and a {percent:d} percent discount"))
def store_charges(store_settings, shipping_cents, percent):
    store_settings(shipping_cents=shipping_cents, discount_percent=percent)


@given(parsers.parse("a guest order for {quantity:d} units"), target_fixture="order_id")
def guest_order(guest_checkout, product, quantity):
    return guest_checkout(product, quantity)


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then(parsers.parse("the product stock is {stock:d}"))
def product_stock_is(product, stock):
    assert current_domain.repository_for(Product).get(product.id).stock == stock


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).status == status


@then(parsers.cfparse('the payment status is "{status}"'))
def payment_status_is(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).payment.status == status


@then(parsers.cfparse('the checkout fails with "{code}"'))
def checkout_fails_with(error, code):
    assert isinstance(error["exc"], StorefrontError), "Expected a storefront error but none was raised"
    assert error["exc"].code == code
