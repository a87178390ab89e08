"""Read side of the cart: lines joined with live catalogue data."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product


def view_cart(customer_id):
    """Return the customer's visible cart lines and a price summary.

    Lines whose product has been removed or deactivated stay in storage but
    are left out of both the listing and the summary.
    """
    cart = current_domain.repository_for(ShoppingCart).for_customer(customer_id)
    product_repo = current_domain.repository_for(Product)

    lines = []
    for item in cart.items:
        try:
            product = product_repo.get(item.product_id)
        except ObjectNotFoundError:
            continue
        if not product.is_active:
            continue

        lines.append(
            {
                "product_id": str(product.id),
                "name": product.name,
                "price": product.price,
                "available": product.quantity,
                "in_stock": product.is_in_stock(),
                "quantity": item.quantity,
                "subtotal": round(product.price * item.quantity, 2),
                "added_at": item.added_at,
            }
        )

    return {
        "items": lines,
        "summary": {
            "total_items": sum(line["quantity"] for line in lines),
            "total_price": round(sum(line["price"] * line["quantity"] for line in lines), 2),
        },
    }
