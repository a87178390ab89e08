"""Domain exceptions for the storefront.

Business-rule failures extend Protean's exception types so that callers can
handle them uniformly: ``ValidationError`` subclasses map to 400 responses,
``ObjectNotFoundError`` subclasses to 404 and ``InvalidOperationError``
subclasses to 409. Every exception carries a human-readable ``message``.
"""

from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError


class InsufficientStock(ValidationError):
    """Requested quantity exceeds the product's available stock."""

    def __init__(self, product_id, available, requested, message=None):
        self.product_id = str(product_id)
        self.available = available
        self.requested = requested
        self.message = message or (
            f"Insufficient stock for product {product_id}. Only {available} available, {requested} requested"
        )
        super().__init__({"quantity": [self.message]})


class EmptyCart(ValidationError):
    def __init__(self, customer_id):
        self.customer_id = str(customer_id)
        self.message = "Cart is empty"
        super().__init__({"cart": [self.message]})


class NotCancellable(ValidationError):
    def __init__(self, order_id, status):
        self.order_id = str(order_id)
        self.status = status
        self.message = f"Order cannot be cancelled. Current status: {status}"
        super().__init__({"status": [self.message]})


class InvalidStatusTransition(ValidationError):
    def __init__(self, order_id, current, target):
        self.order_id = str(order_id)
        self.current = current
        self.target = target
        self.message = f"Cannot change order status from {current} to {target}"
        super().__init__({"status": [self.message]})


class OrderNotFound(ObjectNotFoundError):
    def __init__(self, order_id):
        self.order_id = str(order_id)
        self.message = "Order not found"
        super().__init__({"order_id": [self.message]})


class ProductNotFound(ObjectNotFoundError):
    def __init__(self, product_id):
        self.product_id = str(product_id)
        self.message = "Product not found"
        super().__init__({"product_id": [self.message]})


class ProductUnavailable(ObjectNotFoundError):
    """Product is missing from the catalogue or no longer active."""

    def __init__(self, product_id, name=None):
        self.product_id = str(product_id)
        self.message = f"Product {name or product_id} is no longer available"
        super().__init__({"product_id": [self.message]})


class CartItemNotFound(ObjectNotFoundError):
    def __init__(self, product_id):
        self.product_id = str(product_id)
        self.message = "Item not found in cart"
        super().__init__({"product_id": [self.message]})


class DuplicateOrderNumber(InvalidOperationError):
    def __init__(self, attempts):
        self.attempts = attempts
        self.message = f"Could not allocate a unique order number after {attempts} attempts"
        super().__init__({"order_number": [self.message]})


class CheckoutConflict(InvalidOperationError):
    """Concurrent stock changes kept invalidating the checkout."""

    def __init__(self, customer_id, attempts):
        self.customer_id = str(customer_id)
        self.attempts = attempts
        self.message = "Stock changed while placing the order, please try again"
        super().__init__({"cart": [self.message]})


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message):
        self.message = message
        super().__init__(message)


class Unauthorized(StorefrontError):
    status_code = 401


class Forbidden(StorefrontError):
    status_code = 403
