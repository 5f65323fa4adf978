from __future__ import annotations

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal, InvalidOperation

from .exceptions import InvalidAmountError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

ROUNDING_MODES = {
    "half_up": ROUND_HALF_UP,
    "half_even": ROUND_HALF_EVEN,
}
DEFAULT_ROUNDING = ROUND_HALF_UP

CURRENCY_SYMBOLS = {"MXN": "$", "USD": "$", "EUR": "€", "GBP": "£"}


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a monetary value")
    # str() first so 25.5 becomes Decimal("25.5"), not its binary expansion
    return Decimal(str(value))


def round2(value: Decimal | int | float | str, rounding: str = DEFAULT_ROUNDING) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=rounding)


def resolve_rounding(name: str | None) -> str:
    if not name:
        return DEFAULT_ROUNDING
    key = name.strip().lower().replace("-", "_")
    try:
        return ROUNDING_MODES[key]
    except KeyError as exc:
        raise ValueError(f"Unsupported rounding mode: {name!r}") from exc


def parse_amount(raw: object) -> Decimal:
    """Parse an operator-entered amount such as ``" 60.00 "`` or ``60``.

    Raises InvalidAmountError for anything that is not a finite, non-negative
    number. The value is returned unrounded.
    """
    if raw is None or isinstance(raw, bool):
        raise InvalidAmountError(raw, "amount is required")
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            raise InvalidAmountError(raw, "amount is required")
    elif isinstance(raw, (int, float, Decimal)):
        text = str(raw)
    else:
        raise InvalidAmountError(raw, "not a number")
    try:
        amount = Decimal(text)
    except InvalidOperation as exc:
        raise InvalidAmountError(raw, "not a number") from exc
    if not amount.is_finite():
        raise InvalidAmountError(raw, "not a finite number")
    if amount < 0:
        raise InvalidAmountError(raw, "must not be negative")
    return amount


def coerce_quantity(value: object) -> int:
    if isinstance(value, bool):
        raise ValueError("quantity must be an integer")
    if isinstance(value, int):
        return value
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"quantity must be an integer, got {value!r}") from exc
    if not number.is_finite() or number != number.to_integral_value():
        raise ValueError(f"quantity must be an integer, got {value!r}")
    return int(number)


def format_money(value: Decimal | int | float | str, currency: str = "MXN", rounding: str = DEFAULT_ROUNDING) -> str:
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), "")
    amount = round2(value, rounding)
    text = f"{amount:,.2f}"
    if symbol:
        return f"{symbol}{text}"
    return f"{text} {currency.upper()}"
