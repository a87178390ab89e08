"""Storefront bounded context — Catalogue stock, Shopping Cart, Checkout and Orders.

Products, carts and orders live in one domain so that a checkout can withdraw
stock, record the order and clear the cart inside a single unit of work.
"""

from protean.domain import Domain

from storefront.utils.logging import get_logger

storefront = Domain(name="storefront")

logger = get_logger(__name__)
