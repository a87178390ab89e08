"""Shared BDD fixtures and step definitions for the storefront."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from storefront.cart.cart import ShoppingCart
from storefront.cart.items import AddToCart
from storefront.catalogue.management import AddProduct
from storefront.catalogue.product import Product


@pytest.fixture()
def catalogue():
    """Product ids by name."""
    return {}


@pytest.fixture()
def outcomes():
    """Checkout results by customer: the placed order or the raised error."""
    return {}


@given(parsers.cfparse('the catalogue has "{name}" priced {price:f} with {quantity:d} in stock'))
def _(catalogue, name, price, quantity):
    catalogue[name] = current_domain.process(
        AddProduct(name=name, price=price, quantity=quantity),
        asynchronous=False,
    )


@given(parsers.cfparse('customer "{customer_id}" has {quantity:d} of "{name}" in the cart'))
def _(catalogue, customer_id, quantity, name):
    current_domain.process(
        AddToCart(customer_id=customer_id, product_id=catalogue[name], quantity=quantity),
        asynchronous=False,
    )


@then(parsers.cfparse('"{name}" has {quantity:d} in stock'))
def _(catalogue, name, quantity):
    assert current_domain.repository_for(Product).get(catalogue[name]).quantity == quantity


@then(parsers.cfparse('the cart of customer "{customer_id}" is empty'))
def _(customer_id):
    assert current_domain.repository_for(ShoppingCart).get(customer_id).items == []
