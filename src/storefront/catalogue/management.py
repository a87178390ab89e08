"""Catalogue management — commands and handler.

Product CRUD belongs to the back-office; these commands exist so the
catalogue can be seeded and stock adjusted from scripts and tests.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=100)
    description = Text()
    price = Float(required=True, min_value=0.0)
    quantity = Integer(default=0, min_value=0)
    category_id = Identifier()


@storefront.command(part_of="Product")
class ActivateProduct:
    product_id = Identifier(required=True)


@storefront.command(part_of="Product")
class DeactivateProduct:
    product_id = Identifier(required=True)


@storefront.command(part_of="Product")
class RestockProduct:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.add(
            name=command.name,
            price=command.price,
            quantity=command.quantity or 0,
            description=command.description,
            category_id=command.category_id,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(ActivateProduct)
    def activate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.activate()
        repo.add(product)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)

    @handle(RestockProduct)
    def restock_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.restock(command.quantity)
        repo.add(product)
