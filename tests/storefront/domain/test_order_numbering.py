import re
from datetime import UTC, datetime

from storefront.order.numbering import generate_order_number


def test_order_number_format():
    number = generate_order_number(datetime(2026, 3, 9, tzinfo=UTC))
    assert re.fullmatch(r"ORD-20260309-[A-Z0-9]{6}", number)


def test_order_numbers_differ():
    numbers = {generate_order_number() for _ in range(50)}
    assert len(numbers) > 1
