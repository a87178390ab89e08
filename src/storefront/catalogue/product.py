"""Product aggregate — the catalogue record whose stock checkout draws from.

Only the parts of a product the ordering core depends on are modelled here:
name and price (snapshotted into order lines), the active flag, and the
available quantity. ``quantity`` only changes through ``withdraw_stock`` and
``restock`` so that every stock movement is checked and recorded as an event.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from storefront.catalogue.events import (
    ProductActivated,
    ProductAdded,
    ProductDeactivated,
    StockRestored,
    StockWithdrawn,
)
from storefront.domain import storefront
from storefront.errors import InsufficientStock


@storefront.aggregate
class Product:
    name = String(required=True, max_length=100)
    description = Text()
    price = Float(required=True, min_value=0.0)
    quantity = Integer(default=0, min_value=0)
    is_active = Boolean(default=True)
    category_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def stock_cannot_go_negative(self):
        if self.quantity is not None and self.quantity < 0:
            raise ValidationError({"quantity": ["Quantity cannot be negative"]})

    @classmethod
    def add(cls, name, price, quantity=0, description=None, category_id=None):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            price=price,
            quantity=quantity,
            category_id=category_id,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=name,
                price=price,
                quantity=quantity,
                added_at=now,
            )
        )
        return product

    def is_in_stock(self):
        return self.quantity > 0

    # -------------------------------------------------------------------
    # Stock movements
    # -------------------------------------------------------------------
    def withdraw_stock(self, quantity):
        """Take ``quantity`` units out of stock, refusing to oversell."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if quantity > self.quantity:
            raise InsufficientStock(
                self.id,
                available=self.quantity,
                requested=quantity,
                message=f"Insufficient stock for {self.name}. Only {self.quantity} available",
            )

        previous = self.quantity
        now = datetime.now(UTC)
        self.quantity = previous - quantity
        self.updated_at = now

        self.raise_(
            StockWithdrawn(
                product_id=str(self.id),
                quantity=quantity,
                previous_quantity=previous,
                new_quantity=self.quantity,
                withdrawn_at=now,
            )
        )

    def restock(self, quantity):
        """Put ``quantity`` units back into stock."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        previous = self.quantity
        now = datetime.now(UTC)
        self.quantity = previous + quantity
        self.updated_at = now

        self.raise_(
            StockRestored(
                product_id=str(self.id),
                quantity=quantity,
                previous_quantity=previous,
                new_quantity=self.quantity,
                restored_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Availability
    # -------------------------------------------------------------------
    def activate(self):
        if self.is_active:
            raise ValidationError({"is_active": ["Product is already active"]})

        now = datetime.now(UTC)
        self.is_active = True
        self.updated_at = now
        self.raise_(ProductActivated(product_id=str(self.id), activated_at=now))

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"is_active": ["Product is already inactive"]})

        now = datetime.now(UTC)
        self.is_active = False
        self.updated_at = now
        self.raise_(ProductDeactivated(product_id=str(self.id), deactivated_at=now))
