"""Pydantic request/response schemas for the Storefront API.

These are external contracts, kept separate from the Protean commands and
aggregates. Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def dump(self):
        return self.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(CamelModel):
    full_name: str = Field(min_length=2, max_length=100)
    address: str = Field(min_length=10, max_length=200)
    city: str = Field(min_length=2, max_length=50)
    postal_code: str = Field(min_length=4, max_length=10)
    country: str = Field(min_length=2, max_length=50)


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(CamelModel):
    quantity: int = Field(default=1, ge=1)


class UpdateCartQuantityRequest(CamelModel):
    quantity: int = Field(ge=1)


class CheckoutRequest(CamelModel):
    shipping_address: ShippingAddressSchema
    notes: str | None = Field(default=None, max_length=500)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "shippingAddress": {
                        "fullName": "Jane Doe",
                        "address": "123 Main Street, Apt 4",
                        "city": "Springfield",
                        "postalCode": "12345",
                        "country": "USA",
                    },
                    "notes": "Leave at the door",
                }
            ]
        },
    )


class UpdateOrderStatusRequest(CamelModel):
    status: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartLineSchema(CamelModel):
    product_id: str
    name: str
    price: float
    available: int
    in_stock: bool
    quantity: int
    subtotal: float
    added_at: datetime | None = None


class CartSummarySchema(CamelModel):
    total_items: int
    total_price: float


class CartSchema(CamelModel):
    items: list[CartLineSchema]
    summary: CartSummarySchema


class CartItemAddedSchema(CamelModel):
    product_id: str
    product_name: str
    quantity: int
    total_in_cart: int


class CartItemUpdatedSchema(CamelModel):
    product_id: str
    product_name: str
    new_quantity: int


class CartItemRemovedSchema(CamelModel):
    product_id: str
    removed_quantity: int


class CartClearedSchema(CamelModel):
    removed_items: int


class OrderSummarySchema(CamelModel):
    order_number: str
    total_items: int
    total_amount: float
    status: str
    created_at: datetime | None = None
    delivery_date: datetime | None = None


class OrderItemSchema(CamelModel):
    product_id: str
    name: str
    unit_price: float
    quantity: int
    line_total: float


class OrderSchema(CamelModel):
    id: str
    order_number: str
    customer_id: str
    items: list[OrderItemSchema]
    total_items: int
    total_amount: float
    status: str
    shipping_address: ShippingAddressSchema
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    delivery_date: datetime | None = None
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None

    @classmethod
    def from_order(cls, order):
        address = order.shipping_address
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            customer_id=str(order.customer_id),
            items=[
                OrderItemSchema(
                    product_id=str(item.product_id),
                    name=item.name,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    line_total=item.line_total,
                )
                for item in order.items
            ],
            total_items=order.total_items,
            total_amount=order.total_amount,
            status=order.status,
            shipping_address=ShippingAddressSchema(
                full_name=address.full_name,
                address=address.address,
                city=address.city,
                postal_code=address.postal_code,
                country=address.country,
            ),
            notes=order.notes,
            created_at=order.created_at,
            updated_at=order.updated_at,
            delivery_date=order.delivery_date,
            cancelled_at=order.cancelled_at,
            cancelled_by=str(order.cancelled_by) if order.cancelled_by else None,
        )
