"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductAdded:
    """A product was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    price = Float(required=True)
    quantity = Integer(required=True)
    added_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductActivated:
    __version__ = 1

    product_id = Identifier(required=True)
    activated_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDeactivated:
    __version__ = 1

    product_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)


@storefront.event(part_of="Product")
class StockWithdrawn:
    """Stock was taken out of the catalogue, normally by a checkout."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    withdrawn_at = DateTime(required=True)


@storefront.event(part_of="Product")
class StockRestored:
    """Stock was put back, e.g. by an order cancellation or a delivery from a supplier."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    restored_at = DateTime(required=True)
