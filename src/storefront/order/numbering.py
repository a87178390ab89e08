"""Human-readable order numbers: ``ORD-<YYYYMMDD>-<6 chars of [A-Z0-9]>``."""

import secrets
import string
from datetime import UTC, datetime

from protean.utils.globals import current_domain

from storefront.errors import DuplicateOrderNumber
from storefront.order.order import Order

MAX_ORDER_NUMBER_ATTEMPTS = 5
SUFFIX_LENGTH = 6
_ALPHABET = string.ascii_uppercase + string.digits


def generate_order_number(now=None):
    now = now or datetime.now(UTC)
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"ORD-{now:%Y%m%d}-{suffix}"


def allocate_order_number(generate=generate_order_number):
    """Return an order number that no stored order uses yet."""
    repo = current_domain.repository_for(Order)
    for _ in range(MAX_ORDER_NUMBER_ATTEMPTS):
        candidate = generate()
        if not repo.number_taken(candidate):
            return candidate

    raise DuplicateOrderNumber(MAX_ORDER_NUMBER_ATTEMPTS)
