from __future__ import annotations

import random
from decimal import Decimal

from pos_core.cart_store import CartStore
from pos_core.models import CartLine, Customer, Product
from pos_core.pricing import cart_total, item_count, line_subtotal, summarize


def _line(price: str, quantity: int, product_id: str = "p") -> CartLine:
    return CartLine(product_id=product_id, name=product_id, unit_price=Decimal(price), quantity=quantity)


def test_line_subtotal() -> None:
    assert line_subtotal(_line("25.50", 2)) == Decimal("51.00")
    assert line_subtotal(_line("0.01", 3)) == Decimal("0.03")


def test_empty_cart_totals_zero(general_customer: Customer) -> None:
    cart = CartStore(general_customer)

    totals = summarize(cart)

    assert totals.total == Decimal("0.00")
    assert totals.item_count == 0
    assert totals.line_count == 0


def test_totals_follow_cart(products: list[Product], general_customer: Customer) -> None:
    cart = CartStore(general_customer)
    cart.add_item(products[0])
    cart.add_item(products[0])
    cart.add_item(products[6])

    assert cart_total(cart) == Decimal("136.00")
    assert item_count(cart) == 3
    assert summarize(cart).line_count == 2


def test_total_equals_sum_of_line_subtotals(products: list[Product]) -> None:
    rng = random.Random(7)
    for _ in range(100):
        lines = [
            CartLine.from_product(product, quantity=rng.randint(1, 9))
            for product in rng.sample(products, rng.randint(1, len(products)))
        ]
        assert cart_total(lines) == sum((line_subtotal(line) for line in lines), Decimal("0"))
        assert item_count(lines) == sum(line.quantity for line in lines)

