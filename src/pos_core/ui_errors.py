from __future__ import annotations

from dataclasses import dataclass

from .exceptions import (
    EmptyCartError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidPaymentMethodError,
    PosError,
    SaleSinkError,
)


@dataclass(frozen=True)
class UserFacingError:
    message: str
    code: str
    details: str | None = None
    trace_id: str | None = None
    keep_payment_open: bool = False
    disable_settle: bool = False
    reopen_payment: bool = False


def to_user_facing_error(error: PosError) -> UserFacingError:
    """Map an outcome error to what the operator sees and which dialog stays up."""
    if isinstance(error, InsufficientFundsError):
        return UserFacingError(
            message=f"Received amount is short by {error.shortfall:.2f}",
            code=error.code,
            details=error.message,
            keep_payment_open=True,
        )
    if isinstance(error, InvalidAmountError):
        return UserFacingError(
            message="Enter the received amount as a number, e.g. 60.00",
            code=error.code,
            details=error.message,
            keep_payment_open=True,
        )
    if isinstance(error, InvalidPaymentMethodError):
        return UserFacingError(
            message="Choose cash, card or transfer",
            code=error.code,
            details=error.message,
            keep_payment_open=True,
        )
    if isinstance(error, EmptyCartError):
        return UserFacingError(message="Add products before charging", code=error.code, disable_settle=True)
    if isinstance(error, SaleSinkError):
        return UserFacingError(
            message="The sale could not be saved. The cart was kept; please retry.",
            code=error.code,
            details=error.message,
            trace_id=error.trace_id,
            reopen_payment=True,
        )
    return UserFacingError(message=error.message, code=error.code)
