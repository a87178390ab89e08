"""Checkout — converts a customer's cart into an order.

The ``PlaceOrder`` handler runs inside a single unit of work: it re-reads
every product in the cart, withdraws stock, creates the order and clears
the cart. Any failure rolls all of it back, so a rejected checkout leaves
stock, orders and the cart exactly as they were.

Product writes are version-checked when the unit of work commits. When
another checkout changed a product in between, the commit fails with
``ExpectedVersionError`` and :func:`checkout` runs the command again
against fresh stock, up to ``MAX_CHECKOUT_ATTEMPTS`` times. Protean already
retries a handler a few times on a version conflict before the error
reaches this loop, so each attempt here covers a burst of contention.
"""

import json

from protean import handle
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.domain import logger, storefront
from storefront.errors import CheckoutConflict, EmptyCart, InsufficientStock, ProductUnavailable
from storefront.order.numbering import allocate_order_number
from storefront.order.order import Order, ShippingAddress

MAX_CHECKOUT_ATTEMPTS = 3


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON: address dict
    notes = String(max_length=500)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        shipping_address = ShippingAddress(**json.loads(command.shipping_address))

        cart_repo = current_domain.repository_for(ShoppingCart)
        cart = cart_repo.for_customer(command.customer_id)
        if cart.is_empty:
            raise EmptyCart(command.customer_id)

        # Every line is checked before anything is withdrawn
        product_repo = current_domain.repository_for(Product)
        reserved = []
        for item in cart.items:
            try:
                product = product_repo.get(item.product_id)
            except ObjectNotFoundError:
                raise ProductUnavailable(item.product_id) from None

            if not product.is_active:
                raise ProductUnavailable(product.id, name=product.name)
            if item.quantity > product.quantity:
                raise InsufficientStock(
                    product.id,
                    available=product.quantity,
                    requested=item.quantity,
                    message=f"Insufficient stock for {product.name}. Only {product.quantity} available",
                )
            reserved.append((product, item.quantity))

        for product, quantity in reserved:
            product.withdraw_stock(quantity)
            product_repo.add(product)

        order = Order.place(
            customer_id=command.customer_id,
            order_number=allocate_order_number(),
            lines=[
                {
                    "product_id": str(product.id),
                    "name": product.name,
                    "unit_price": product.price,
                    "quantity": quantity,
                }
                for product, quantity in reserved
            ],
            shipping_address=shipping_address,
            notes=command.notes,
        )
        current_domain.repository_for(Order).add(order)

        cart.clear()
        cart_repo.add(cart)

        return str(order.id)


def _process(command):
    return current_domain.process(command, asynchronous=False)


def checkout(customer_id, shipping_address, notes=None):
    """Place an order from the customer's cart and return it.

    ``shipping_address`` is a mapping with ``full_name``, ``address``,
    ``city``, ``postal_code`` and ``country``.
    """
    command = PlaceOrder(
        customer_id=str(customer_id),
        shipping_address=json.dumps(dict(shipping_address)),
        notes=notes,
    )

    for attempt in range(1, MAX_CHECKOUT_ATTEMPTS + 1):
        try:
            order_id = _process(command)
        except ExpectedVersionError:
            logger.warning(
                "checkout_version_conflict",
                customer_id=str(customer_id),
                attempt=attempt,
                max_attempts=MAX_CHECKOUT_ATTEMPTS,
            )
            continue
        except (EmptyCart, InsufficientStock, ProductUnavailable) as exc:
            logger.info("checkout_rejected", customer_id=str(customer_id), reason=exc.message)
            raise

        order = current_domain.repository_for(Order).get(order_id)
        logger.info(
            "order_placed",
            order_id=order_id,
            order_number=order.order_number,
            customer_id=str(customer_id),
            total_items=order.total_items,
            total_amount=order.total_amount,
            attempt=attempt,
        )
        return order

    raise CheckoutConflict(customer_id, MAX_CHECKOUT_ATTEMPTS)
