from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


class PosError(Exception):
    """Base for conditions the cart and settlement core reports to its caller."""

    code = "POS_ERROR"
    default_message = "Point-of-sale operation failed"

    def __init__(self, message: str | None = None, *, details: object | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class EmptyCartError(PosError):
    code = "EMPTY_CART"
    default_message = "Nothing to pay: the cart has no lines"


class InsufficientFundsError(PosError):
    code = "INSUFFICIENT_FUNDS"
    default_message = "Tendered amount does not cover the total"

    def __init__(self, *, total: Decimal, tendered: Decimal) -> None:
        self.total = total
        self.tendered = tendered
        super().__init__(
            f"Tendered {tendered:.2f} is short of total {total:.2f} by {self.shortfall:.2f}",
            details={"total": str(total), "tendered": str(tendered), "shortfall": str(self.shortfall)},
        )

    @property
    def shortfall(self) -> Decimal:
        return self.total - self.tendered


class InvalidAmountError(PosError):
    code = "INVALID_AMOUNT"
    default_message = "Amount must be a non-negative number"

    def __init__(self, raw: object, reason: str | None = None) -> None:
        self.raw = raw
        message = f"Invalid amount {raw!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, details={"raw": str(raw), "reason": reason})


class InvalidPaymentMethodError(PosError):
    code = "INVALID_PAYMENT_METHOD"
    default_message = "Payment method must be one of cash, card, transfer"


class SaleSinkError(PosError):
    code = "SALE_NOT_RECORDED"
    default_message = "Sale was not recorded"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: object | None = None,
        trace_id: str | None = None,
    ) -> None:
        self.trace_id = trace_id
        super().__init__(message, details=details)


class CustomerMissingError(PosError):
    """The cart must always hold a customer; reaching this is a caller bug."""

    code = "CUSTOMER_MISSING"
    default_message = "A customer must be selected at all times"


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None
    trace_id: str | None
    status_code: int
    raw_payload: object | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message}{trace}"


class AuthError(ApiError):
    """401/403 from the remote store."""


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    pass


class ConflictError(ApiError):
    """409, typically a replayed idempotency key with a different body."""


class RateLimitError(ApiError):
    pass


class ServerError(ApiError):
    pass


class TransportError(ApiError):
    """Network/transport failure before an HTTP response was returned."""
