"""Order aggregate — the record of a completed checkout.

An order snapshots the cart lines (name, unit price, quantity) at checkout
time, so later catalogue changes never alter it. Orders are never deleted.

State machine:
    PENDING → PROCESSING → SHIPPED → DELIVERED
    CANCELLED (from PENDING or PROCESSING)

Administrators may move an order between the non-cancelled states freely;
an order that has been cancelled stays cancelled because its stock has
already been released.
"""

import json
import math
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from storefront.domain import storefront
from storefront.errors import InvalidStatusTransition, NotCancellable, OrderNotFound
from storefront.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


_CANCELLABLE_STATES = {
    OrderStatus.PENDING.value,
    OrderStatus.PROCESSING.value,
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order is delivered, captured at checkout and never changed."""

    full_name = String(required=True, min_length=2, max_length=100)
    address = String(required=True, min_length=10, max_length=200)
    city = String(required=True, min_length=2, max_length=50)
    postal_code = String(required=True, min_length=4, max_length=10)
    country = String(required=True, min_length=2, max_length=50)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A product line as it was priced at checkout."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    line_total = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=20, unique=True)
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_items = Integer(default=0, min_value=0)
    total_amount = Float(default=0.0, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    shipping_address = ValueObject(ShippingAddress, required=True)
    notes = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()
    delivery_date = DateTime()
    cancelled_at = DateTime()
    cancelled_by = Identifier()

    @invariant.post
    def totals_match_line_items(self):
        items = self.items or []
        if self.total_items != sum(item.quantity for item in items):
            raise ValidationError({"total_items": ["Total items must equal the sum of line quantities"]})
        if not math.isclose(self.total_amount or 0.0, sum(item.line_total for item in items), abs_tol=1e-9):
            raise ValidationError({"total_amount": ["Total amount must equal the sum of line totals"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_id, order_number, lines, shipping_address, notes=None):
        """Create a pending order from ``lines``.

        Each line is a mapping with ``product_id``, ``name``, ``unit_price``
        and ``quantity``. Totals are derived here and nowhere else.
        """
        items = [
            OrderItem(
                product_id=line["product_id"],
                name=line["name"],
                unit_price=line["unit_price"],
                quantity=line["quantity"],
                line_total=line["unit_price"] * line["quantity"],
            )
            for line in lines
        ]
        if not items:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        order = cls(
            order_number=order_number,
            customer_id=customer_id,
            items=items,
            total_items=sum(item.quantity for item in items),
            total_amount=sum(item.line_total for item in items),
            status=OrderStatus.PENDING.value,
            shipping_address=shipping_address,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_id=str(customer_id),
                items=json.dumps(
                    [
                        {
                            "product_id": str(item.product_id),
                            "name": item.name,
                            "unit_price": item.unit_price,
                            "quantity": item.quantity,
                        }
                        for item in items
                    ]
                ),
                total_items=order.total_items,
                total_amount=order.total_amount,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def can_be_cancelled(self):
        return self.status in _CANCELLABLE_STATES

    def is_owned_by(self, customer_id):
        return str(self.customer_id) == str(customer_id)

    def summary(self):
        return {
            "order_number": self.order_number,
            "total_items": self.total_items,
            "total_amount": round(self.total_amount, 2),
            "status": self.status,
            "created_at": self.created_at,
            "delivery_date": self.delivery_date,
        }

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def cancel(self, cancelled_by):
        """Mark the order cancelled. Returning stock is the caller's job."""
        if not self.can_be_cancelled():
            raise NotCancellable(self.id, self.status)

        previous = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancelled_at = now
        self.cancelled_by = cancelled_by
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                cancelled_by=str(cancelled_by),
                cancelled_at=now,
            )
        )

    def set_status(self, new_status, changed_by=None):
        """Move the order to ``new_status``.

        Setting ``cancelled`` goes through :meth:`cancel`, so the usual
        cancellation rules apply.
        """
        try:
            target = OrderStatus(new_status).value
        except ValueError:
            raise ValidationError(
                {"status": [f"Invalid status. Must be one of: {', '.join(s.value for s in OrderStatus)}"]}
            ) from None

        if target == OrderStatus.CANCELLED.value:
            self.cancel(changed_by)
            return

        if self.status == OrderStatus.CANCELLED.value:
            raise InvalidStatusTransition(self.id, self.status, target)

        previous = self.status
        now = datetime.now(UTC)
        self.status = target
        self.updated_at = now
        if target == OrderStatus.DELIVERED.value:
            self.delivery_date = now

        if previous != target:
            self.raise_(
                OrderStatusChanged(
                    order_id=str(self.id),
                    order_number=self.order_number,
                    previous_status=previous,
                    new_status=target,
                    changed_at=now,
                )
            )


@storefront.repository(part_of=Order)
class OrderRepository:
    def find(self, order_id):
        try:
            return self.get(order_id)
        except ObjectNotFoundError:
            raise OrderNotFound(order_id) from None

    def for_customer(self, customer_id):
        """The customer's orders, newest first."""
        return self._dao.query.filter(customer_id=str(customer_id)).order_by("-created_at").all().items

    def recent(self, limit=10):
        return self._dao.query.order_by("-created_at").limit(limit).all().items

    def number_taken(self, order_number):
        return self._dao.query.filter(order_number=order_number).all().total > 0
