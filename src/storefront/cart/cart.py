"""Shopping Cart aggregate (CQRS) — the customer's working list of products.

There is exactly one cart per customer and it is identified by the
customer's id. A cart holds at most one line per product; adding a product
that is already in the cart increases that line's quantity. Stock checks
made here are advisory: stock may change before checkout, which checks again.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from storefront.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemQuantityChanged,
    CartItemRemoved,
)
from storefront.domain import storefront
from storefront.errors import CartItemNotFound, InsufficientStock


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@storefront.aggregate
class ShoppingCart:
    customer_id = Identifier(identifier=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def line_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def quantity_of(self, product_id):
        line = self.line_for(product_id)
        return line.quantity if line else 0

    @property
    def item_count(self):
        """Total units across all stored lines, visible or not."""
        return sum(item.quantity for item in self.items)

    @property
    def is_empty(self):
        return not self.items

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity, available):
        """Add ``quantity`` units of a product, merging with an existing line.

        ``available`` is the product's current stock, used to reject additions
        that could never be fulfilled.
        """
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be a positive integer"]})

        current = self.quantity_of(product_id)
        if current + quantity > available:
            raise InsufficientStock(
                product_id,
                available=available,
                requested=current + quantity,
                message=f"Cannot add {quantity} items. Only {max(available - current, 0)} more available",
            )

        now = datetime.now(UTC)
        existing = self.line_for(product_id)
        if existing:
            existing.quantity += quantity
        else:
            self.add_items(CartItem(product_id=product_id, quantity=quantity, added_at=now))

        self.updated_at = now
        total_in_cart = current + quantity

        self.raise_(
            CartItemAdded(
                customer_id=str(self.customer_id),
                product_id=str(product_id),
                quantity=quantity,
                total_in_cart=total_in_cart,
            )
        )
        return total_in_cart

    def set_item_quantity(self, product_id, quantity, available):
        """Replace the quantity of an existing line. Use ``remove_item`` to drop it."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be a positive integer"]})

        line = self.line_for(product_id)
        if line is None:
            raise CartItemNotFound(product_id)

        if quantity > available:
            raise InsufficientStock(
                product_id,
                available=available,
                requested=quantity,
                message=f"Only {available} items available in stock",
            )

        previous = line.quantity
        line.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemQuantityChanged(
                customer_id=str(self.customer_id),
                product_id=str(product_id),
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id):
        line = self.line_for(product_id)
        if line is None:
            raise CartItemNotFound(product_id)

        removed = line.quantity
        self.remove_items(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                customer_id=str(self.customer_id),
                product_id=str(product_id),
                removed_quantity=removed,
            )
        )
        return removed

    def clear(self):
        """Empty the cart. Clearing an empty cart changes nothing."""
        removed = self.item_count
        if self.is_empty:
            return 0

        for item in list(self.items):
            self.remove_items(item)

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CartCleared(
                customer_id=str(self.customer_id),
                removed_items=removed,
                cleared_at=now,
            )
        )
        return removed


@storefront.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def for_customer(self, customer_id):
        """Return the customer's cart, or a new unsaved one if they have none yet."""
        try:
            return self.get(str(customer_id))
        except ObjectNotFoundError:
            return ShoppingCart.create(customer_id=str(customer_id))
