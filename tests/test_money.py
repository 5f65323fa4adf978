from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal

import pytest

from pos_core.exceptions import InvalidAmountError
from pos_core.money import coerce_quantity, format_money, parse_amount, resolve_rounding, round2


def test_round2_half_up_by_default() -> None:
    assert round2(Decimal("2.345")) == Decimal("2.35")
    assert round2(Decimal("2.344")) == Decimal("2.34")
    assert round2(25.5) == Decimal("25.50")


def test_round2_half_even_when_requested() -> None:
    assert round2(Decimal("2.345"), ROUND_HALF_EVEN) == Decimal("2.34")
    assert round2(Decimal("2.355"), ROUND_HALF_EVEN) == Decimal("2.36")


def test_float_input_keeps_its_decimal_text() -> None:
    assert round2(0.1 + 0.2) == Decimal("0.30")
    assert round2(1.005) == Decimal("1.01")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("60", Decimal("60")),
        (" 60.00 ", Decimal("60.00")),
        (60, Decimal("60")),
        (60.5, Decimal("60.5")),
        (Decimal("0"), Decimal("0")),
    ],
)
def test_parse_amount_accepts_numbers(raw: object, expected: Decimal) -> None:
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "", "   ", None, "-1", -0.01, "NaN", "Infinity", "1,000.00", True, object()])
def test_parse_amount_rejects_invalid(raw: object) -> None:
    with pytest.raises(InvalidAmountError):
        parse_amount(raw)


def test_coerce_quantity() -> None:
    assert coerce_quantity(3) == 3
    assert coerce_quantity("4") == 4
    assert coerce_quantity("2.0") == 2
    assert coerce_quantity("-1") == -1
    for bad in ("2.5", "abc", True):
        with pytest.raises(ValueError):
            coerce_quantity(bad)


def test_format_money() -> None:
    assert format_money(Decimal("1234.5")) == "$1,234.50"
    assert format_money("9", "EUR") == "€9.00"
    assert format_money("9", "CLP") == "9.00 CLP"


def test_resolve_rounding() -> None:
    assert resolve_rounding(None) == resolve_rounding("half_up")
    assert resolve_rounding("HALF-EVEN") == ROUND_HALF_EVEN
    with pytest.raises(ValueError):
        resolve_rounding("truncate")
