"""Domain events for the ShoppingCart aggregate."""

from protean.fields import DateTime, Identifier, Integer

from storefront.domain import storefront


@storefront.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was added to the shopping cart."""

    __version__ = 1

    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    total_in_cart = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartItemQuantityChanged:
    """The quantity of a cart line was set to a new value."""

    __version__ = 1

    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A line was removed from the shopping cart."""

    __version__ = 1

    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    removed_quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartCleared:
    """Every line was removed, by the customer or by a checkout."""

    __version__ = 1

    customer_id = Identifier(required=True)
    removed_items = Integer(required=True)
    cleared_at = DateTime(required=True)
