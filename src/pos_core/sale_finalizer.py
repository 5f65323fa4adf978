from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from .cart_store import CartStore
from .collaborators import SaleSink
from .exceptions import ApiError, EmptyCartError, PosError, SaleSinkError
from .logging import log_json
from .models import PaymentMethod, Sale, SaleLine
from .money import DEFAULT_ROUNDING
from .payment_validation import PaymentAttempt, PaymentValidationResult, validate_payment
from .pricing import cart_total, item_count, line_subtotal

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_sale_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class SettlementOutcome:
    ok: bool
    sale: Sale | None = None
    validation: PaymentValidationResult | None = None
    error: PosError | None = None
    sale_id: str | None = None


@dataclass
class SaleFinalizer:
    """Turns a paid cart into an immutable Sale.

    The cart is reset only after the sink has accepted the sale, so a failed
    hand-off leaves every line in place for a retry.
    """

    sink: SaleSink
    clock: Clock = _utcnow
    id_factory: IdFactory = new_sale_id
    rounding: str = DEFAULT_ROUNDING
    currency: str = "MXN"

    def finalize(
        self,
        cart: CartStore,
        method: PaymentMethod | str,
        tendered: object = None,
        *,
        operator: str,
        sale_id: str | None = None,
    ) -> SettlementOutcome:
        """Settle ``cart``; pass ``sale_id`` to retry a hand-off under its earlier id."""
        if cart.is_empty:
            return SettlementOutcome(ok=False, error=EmptyCartError())

        lines = cart.lines
        customer = cart.customer
        validation = validate_payment(cart_total(lines, self.rounding), method, tendered, rounding=self.rounding)
        if not validation.ok:
            return SettlementOutcome(ok=False, validation=validation, error=validation.error)

        sale = Sale(
            id=sale_id or self.id_factory(),
            lines=tuple(
                SaleLine(
                    product_id=line.product_id,
                    name=line.name,
                    unit_price=line.unit_price,
                    unit=line.unit,
                    quantity=line.quantity,
                    subtotal=line_subtotal(line, self.rounding),
                )
                for line in lines
            ),
            total=validation.total,
            item_count=item_count(lines),
            customer=customer,
            payment=validation.payment,
            created_at=self.clock(),
            operator=operator,
            currency=self.currency,
        )

        try:
            recorded = self.sink.record(sale)
        except SaleSinkError as exc:
            return self._sink_failed(sale, validation, exc)
        except ApiError as exc:
            return self._sink_failed(
                sale,
                validation,
                SaleSinkError(exc.message, details={"code": exc.code, "status_code": exc.status_code}, trace_id=exc.trace_id),
            )
        except Exception as exc:
            return self._sink_failed(sale, validation, SaleSinkError(str(exc) or None, details={"type": type(exc).__name__}))

        cart.reset()
        log_json(
            logger,
            {
                "event": "sale_finalized",
                "sale_id": recorded.id,
                "total": recorded.total,
                "item_count": recorded.item_count,
                "payment_method": recorded.payment_method.value,
                "operator": operator,
            },
        )
        return SettlementOutcome(ok=True, sale=recorded, validation=validation)

    def finalize_attempt(self, cart: CartStore, attempt: PaymentAttempt, *, operator: str) -> SettlementOutcome:
        # An unchanged cart is retried under the id of its failed hand-off.
        sold = (cart.lines, cart.customer)
        retry_id = attempt.pending_sale_id if attempt.pending_cart == sold else None
        outcome = self.finalize(cart, attempt.method, attempt.tendered, operator=operator, sale_id=retry_id)
        if isinstance(outcome.error, SaleSinkError):
            attempt.pending_sale_id = outcome.sale_id
            attempt.pending_cart = sold
        return outcome

    @staticmethod
    def _sink_failed(sale: Sale, validation: PaymentValidationResult, error: SaleSinkError) -> SettlementOutcome:
        log_json(
            logger,
            {"event": "sale_not_recorded", "sale_id": sale.id, "error": error.message, "trace_id": error.trace_id},
            level=logging.WARNING,
        )
        return SettlementOutcome(ok=False, validation=validation, error=error, sale_id=sale.id)
