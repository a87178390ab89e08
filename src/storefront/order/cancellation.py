"""Order cancellation — command and handler.

Cancelling hands every line's quantity back to its product in the same
unit of work as the status change.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import logger, storefront
from storefront.errors import Forbidden
from storefront.order.order import Order

ADMIN_ROLE = "admin"


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default="user")


def restock_order_items(order):
    """Return every line of ``order`` to stock.

    Products deleted from the catalogue since the order was placed are
    skipped; there is nothing left to restock.
    """
    repo = current_domain.repository_for(Product)
    for item in order.items:
        try:
            product = repo.get(item.product_id)
        except ObjectNotFoundError:
            logger.warning(
                "restock_skipped_missing_product",
                order_id=str(order.id),
                product_id=str(item.product_id),
            )
            continue
        product.restock(item.quantity)
        repo.add(product)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find(command.order_id)

        if command.actor_role != ADMIN_ROLE and not order.is_owned_by(command.actor_id):
            raise Forbidden("Access denied")

        order.cancel(cancelled_by=command.actor_id)
        restock_order_items(order)
        repo.add(order)

        logger.info(
            "order_cancelled",
            order_id=str(order.id),
            order_number=order.order_number,
            cancelled_by=str(command.actor_id),
        )
        return str(order.id)
