"""Read access to orders, with ownership checks applied."""

from protean.utils.globals import current_domain

from storefront.errors import Forbidden
from storefront.order.cancellation import ADMIN_ROLE
from storefront.order.order import Order

RECENT_ORDERS_LIMIT = 10


def orders_for_customer(customer_id):
    return current_domain.repository_for(Order).for_customer(customer_id)


def order_for(order_id, actor_id, actor_role="user"):
    """Fetch one order for its owner or an administrator."""
    order = current_domain.repository_for(Order).find(order_id)
    if actor_role != ADMIN_ROLE and not order.is_owned_by(actor_id):
        raise Forbidden("Access denied")
    return order


def recent_orders(limit=RECENT_ORDERS_LIMIT):
    return current_domain.repository_for(Order).recent(limit=limit)
