"""FastAPI routes for the Storefront — cart and orders.

Every route takes the authenticated principal and hands its id to the
domain explicitly.
"""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.auth import Principal, current_principal, require_admin
from storefront.api.responses import envelope
from storefront.api.schemas import (
    AddToCartRequest,
    CartClearedSchema,
    CartItemAddedSchema,
    CartItemRemovedSchema,
    CartItemUpdatedSchema,
    CartSchema,
    CheckoutRequest,
    OrderSchema,
    OrderSummarySchema,
    UpdateCartQuantityRequest,
    UpdateOrderStatusRequest,
)
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from storefront.cart.view import view_cart
from storefront.checkout.checkout import checkout
from storefront.order.cancellation import CancelOrder
from storefront.order.queries import RECENT_ORDERS_LIMIT, order_for, orders_for_customer, recent_orders
from storefront.order.status import UpdateOrderStatus

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("")
async def get_cart(principal: Principal = Depends(current_principal)):
    cart = CartSchema.model_validate(view_cart(principal.user_id))
    return envelope(data=cart.dump())


@cart_router.post("/add/{product_id}")
async def add_to_cart(
    product_id: str,
    body: AddToCartRequest | None = None,
    principal: Principal = Depends(current_principal),
):
    quantity = body.quantity if body else 1
    result = current_domain.process(
        AddToCart(customer_id=principal.user_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )
    return envelope(
        message="Item added to cart successfully",
        data=CartItemAddedSchema(**result).dump(),
    )


@cart_router.put("/update/{product_id}")
async def update_cart_quantity(
    product_id: str,
    body: UpdateCartQuantityRequest,
    principal: Principal = Depends(current_principal),
):
    result = current_domain.process(
        UpdateCartQuantity(customer_id=principal.user_id, product_id=product_id, quantity=body.quantity),
        asynchronous=False,
    )
    return envelope(
        message="Cart updated successfully",
        data=CartItemUpdatedSchema(**result).dump(),
    )


@cart_router.delete("/remove/{product_id}")
async def remove_from_cart(product_id: str, principal: Principal = Depends(current_principal)):
    result = current_domain.process(
        RemoveFromCart(customer_id=principal.user_id, product_id=product_id),
        asynchronous=False,
    )
    return envelope(
        message="Item removed from cart successfully",
        data=CartItemRemovedSchema(**result).dump(),
    )


@cart_router.delete("/clear")
async def clear_cart(principal: Principal = Depends(current_principal)):
    result = current_domain.process(ClearCart(customer_id=principal.user_id), asynchronous=False)
    return envelope(
        message="Cart cleared successfully",
        data=CartClearedSchema(**result).dump(),
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("/checkout", status_code=201)
async def place_order(body: CheckoutRequest, principal: Principal = Depends(current_principal)):
    order = checkout(
        principal.user_id,
        shipping_address=body.shipping_address.model_dump(),
        notes=body.notes,
    )
    return envelope(
        message="Order placed successfully",
        data=OrderSchema.from_order(order).dump(),
        status_code=201,
    )


@order_router.get("")
async def list_orders(principal: Principal = Depends(current_principal)):
    orders = orders_for_customer(principal.user_id)
    return envelope(
        data=[OrderSchema.from_order(order).dump() for order in orders],
        count=len(orders),
    )


# Declared before "/{order_id}" so "admin" is not taken for an order id
@order_router.get("/admin/recent")
async def list_recent_orders(
    limit: int = Query(default=RECENT_ORDERS_LIMIT, ge=1, le=100),
    principal: Principal = Depends(require_admin),
):
    orders = recent_orders(limit=limit)
    return envelope(
        data=[OrderSchema.from_order(order).dump() for order in orders],
        count=len(orders),
    )


@order_router.put("/admin/{order_id}/status")
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    principal: Principal = Depends(require_admin),
):
    current_domain.process(
        UpdateOrderStatus(order_id=order_id, status=body.status, changed_by=principal.user_id),
        asynchronous=False,
    )
    order = order_for(order_id, principal.user_id, principal.role)
    return envelope(
        message="Order status updated successfully",
        data=OrderSchema.from_order(order).dump(),
    )


@order_router.get("/{order_id}")
async def get_order(order_id: str, principal: Principal = Depends(current_principal)):
    order = order_for(order_id, principal.user_id, principal.role)
    return envelope(data=OrderSchema.from_order(order).dump())


@order_router.get("/{order_id}/summary")
async def get_order_summary(order_id: str, principal: Principal = Depends(current_principal)):
    order = order_for(order_id, principal.user_id, principal.role)
    return envelope(data=OrderSummarySchema(**order.summary()).dump())


@order_router.put("/{order_id}/cancel")
async def cancel_order(order_id: str, principal: Principal = Depends(current_principal)):
    current_domain.process(
        CancelOrder(order_id=order_id, actor_id=principal.user_id, actor_role=principal.role),
        asynchronous=False,
    )
    order = order_for(order_id, principal.user_id, principal.role)
    return envelope(
        message="Order cancelled successfully",
        data=OrderSchema.from_order(order).dump(),
    )
