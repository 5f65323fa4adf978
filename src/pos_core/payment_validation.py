from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from .exceptions import (
    EmptyCartError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidPaymentMethodError,
    PosError,
)
from .models import CardPayment, CashPayment, Payment, PaymentMethod, TransferPayment
from .money import DEFAULT_ROUNDING, ZERO, parse_amount, round2, to_decimal


class PaymentState(str, Enum):
    EDITING = "editing"
    VALID = "valid"
    REJECTED = "rejected"


@dataclass(frozen=True)
class PaymentValidationResult:
    state: PaymentState
    total: Decimal
    method: PaymentMethod | None
    payment: Payment | None = None
    error: PosError | None = None

    @property
    def ok(self) -> bool:
        return self.state is PaymentState.VALID

    @property
    def change(self) -> Decimal | None:
        if isinstance(self.payment, CashPayment):
            return self.payment.change
        return None


def resolve_method(method: PaymentMethod | str) -> PaymentMethod:
    if isinstance(method, PaymentMethod):
        return method
    try:
        return PaymentMethod(str(method).strip().lower())
    except ValueError as exc:
        raise InvalidPaymentMethodError(f"Unsupported payment method: {method!r}") from exc


def validate_payment(
    total: Decimal | int | float | str,
    method: PaymentMethod | str,
    tendered: object = None,
    *,
    rounding: str = DEFAULT_ROUNDING,
) -> PaymentValidationResult:
    """Decide whether a payment may settle ``total``.

    Card and transfer are always accepted. Cash needs a parseable,
    non-negative tendered amount that covers the total; the shortfall is
    reported otherwise. Errors are returned in the result, never raised.
    """
    due = round2(total, rounding)
    try:
        resolved = resolve_method(method)
    except InvalidPaymentMethodError as exc:
        return PaymentValidationResult(state=PaymentState.REJECTED, total=due, method=None, error=exc)

    if due <= ZERO:
        return PaymentValidationResult(
            state=PaymentState.REJECTED,
            total=due,
            method=resolved,
            error=EmptyCartError(),
        )

    if resolved is PaymentMethod.CARD:
        return PaymentValidationResult(state=PaymentState.VALID, total=due, method=resolved, payment=CardPayment())
    if resolved is PaymentMethod.TRANSFER:
        return PaymentValidationResult(state=PaymentState.VALID, total=due, method=resolved, payment=TransferPayment())

    try:
        amount = round2(parse_amount(tendered), rounding)
    except InvalidAmountError as exc:
        return PaymentValidationResult(state=PaymentState.REJECTED, total=due, method=resolved, error=exc)
    if amount < due:
        return PaymentValidationResult(
            state=PaymentState.REJECTED,
            total=due,
            method=resolved,
            error=InsufficientFundsError(total=due, tendered=amount),
        )
    change = round2(amount - due, rounding)
    return PaymentValidationResult(
        state=PaymentState.VALID,
        total=due,
        method=resolved,
        payment=CashPayment(tendered=amount, change=change),
    )


@dataclass
class PaymentAttempt:
    """One pass through the payment dialog.

    Any edit puts the attempt back into EDITING; ``validate`` moves it to
    VALID or REJECTED. Nothing here is persisted.
    """

    total: Decimal
    method: PaymentMethod = PaymentMethod.CASH
    tendered: object = None
    rounding: str = DEFAULT_ROUNDING
    state: PaymentState = PaymentState.EDITING
    result: PaymentValidationResult | None = field(default=None, repr=False)
    # Provisional sale id of a hand-off that failed, and the cart it was built from.
    pending_sale_id: str | None = field(default=None, repr=False)
    pending_cart: tuple | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.total = round2(to_decimal(self.total), self.rounding)
        self.method = resolve_method(self.method)

    def select_method(self, method: PaymentMethod | str) -> None:
        self.method = resolve_method(method)
        self._edited()

    def enter_tendered(self, tendered: object) -> None:
        self.tendered = tendered
        self._edited()

    def preview_change(self) -> Decimal | None:
        """Change to show while the amount is typed; None until it covers the total."""
        if self.method is not PaymentMethod.CASH:
            return None
        try:
            amount = round2(parse_amount(self.tendered), self.rounding)
        except InvalidAmountError:
            return None
        if amount < self.total:
            return None
        return round2(amount - self.total, self.rounding)

    def validate(self) -> PaymentValidationResult:
        self.result = validate_payment(self.total, self.method, self.tendered, rounding=self.rounding)
        self.state = self.result.state
        return self.result

    def _edited(self) -> None:
        self.state = PaymentState.EDITING
        self.result = None
