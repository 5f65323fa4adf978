from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Union

from .cart_store import CartStore
from .models import CartLine
from .money import DEFAULT_ROUNDING, round2

LineSource = Union[CartStore, Iterable[CartLine]]


@dataclass(frozen=True)
class CartTotals:
    total: Decimal
    item_count: int
    line_count: int


def _lines(source: LineSource) -> tuple[CartLine, ...]:
    if isinstance(source, CartStore):
        return source.lines
    return tuple(source)


def line_subtotal(line: CartLine, rounding: str = DEFAULT_ROUNDING) -> Decimal:
    return round2(line.unit_price * line.quantity, rounding)


def cart_total(source: LineSource, rounding: str = DEFAULT_ROUNDING) -> Decimal:
    # Full-precision sum, rounded once.
    raw = sum((line.unit_price * line.quantity for line in _lines(source)), Decimal("0"))
    return round2(raw, rounding)


def item_count(source: LineSource) -> int:
    return sum(line.quantity for line in _lines(source))


def summarize(source: LineSource, rounding: str = DEFAULT_ROUNDING) -> CartTotals:
    lines = _lines(source)
    return CartTotals(
        total=cart_total(lines, rounding),
        item_count=item_count(lines),
        line_count=len(lines),
    )
