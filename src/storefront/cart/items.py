"""Cart item management — commands and handler.

Every command names the customer explicitly; the handler loads (or lazily
creates) that customer's cart and checks the product against the live
catalogue before touching the cart.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.domain import logger, storefront
from storefront.errors import ProductNotFound, ProductUnavailable


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)


@storefront.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class ClearCart:
    customer_id = Identifier(required=True)


def load_available_product(product_id):
    """Fetch a product that can currently be sold, or raise."""
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise ProductNotFound(product_id) from None

    if not product.is_active:
        raise ProductUnavailable(product_id, name=product.name)
    return product


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = load_available_product(command.product_id)
        quantity = command.quantity or 1

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_customer(command.customer_id)
        total_in_cart = cart.add_item(product.id, quantity, available=product.quantity)
        repo.add(cart)

        logger.debug(
            "cart_item_added",
            customer_id=command.customer_id,
            product_id=str(product.id),
            quantity=quantity,
            total_in_cart=total_in_cart,
        )
        return {
            "product_id": str(product.id),
            "product_name": product.name,
            "quantity": quantity,
            "total_in_cart": total_in_cart,
        }

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_customer(command.customer_id)
        product = load_available_product(command.product_id)

        cart.set_item_quantity(product.id, command.quantity, available=product.quantity)
        repo.add(cart)

        return {
            "product_id": str(product.id),
            "product_name": product.name,
            "new_quantity": command.quantity,
        }

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_customer(command.customer_id)
        removed = cart.remove_item(command.product_id)
        repo.add(cart)

        return {"product_id": str(command.product_id), "removed_quantity": removed}

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_customer(command.customer_id)
        removed = cart.clear()
        if removed:
            repo.add(cart)

        return {"removed_items": removed}
