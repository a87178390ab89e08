"""Administrative order status updates — command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.order.cancellation import restock_order_items
from storefront.order.order import Order, OrderStatus


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    changed_by = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find(command.order_id)
        previous = order.status

        order.set_status(command.status, changed_by=command.changed_by)
        if order.status == OrderStatus.CANCELLED.value:
            # Reached only through the cancellation rules, so stock is released once
            restock_order_items(order)
        repo.add(order)

        logger.info(
            "order_status_changed",
            order_id=str(order.id),
            order_number=order.order_number,
            previous_status=previous,
            new_status=order.status,
        )
        return str(order.id)
