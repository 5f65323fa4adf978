from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

from .cart_store import CartStore
from .collaborators import CatalogProvider, CustomerDirectory, ReceiptRenderer, SaleSink
from .config import PosConfig
from .exceptions import EmptyCartError, PosError
from .models import Customer, PaymentMethod, Product, Sale
from .money import coerce_quantity
from .payment_validation import PaymentAttempt
from .pricing import CartTotals, line_subtotal, summarize
from .sale_finalizer import SaleFinalizer, SettlementOutcome
from .telemetry import TelemetryLogger, build_event
from .ui_errors import UserFacingError, to_user_facing_error

logger = logging.getLogger(__name__)


@dataclass
class PosSession:
    """Everything one operator works with between logging in and out.

    Each session owns its own cart; sessions never share one.
    """

    catalog: CatalogProvider
    customers: CustomerDirectory
    sink: SaleSink
    config: PosConfig = field(default_factory=PosConfig)
    operator: str | None = None
    renderer: ReceiptRenderer | None = None
    telemetry: TelemetryLogger | None = None
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    cart: CartStore = field(init=False)
    finalizer: SaleFinalizer = field(init=False)
    payment: PaymentAttempt | None = None
    last_sale: Sale | None = None
    receipt: Any = None
    error: UserFacingError | None = None
    # (sale id, cart) of the last hand-off that failed, kept across dialog reopen
    _retry: tuple[str, tuple] | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.operator = self.operator or self.config.operator
        self.cart = CartStore(self.customers.default_customer())
        self.finalizer = SaleFinalizer(sink=self.sink, rounding=self.config.rounding, currency=self.config.currency)
        if self.telemetry is None:
            self.telemetry = TelemetryLogger(enabled=self.config.telemetry_enabled)

    def search_products(self, term: str = "") -> list[Product]:
        return self.catalog.search(term)

    def add_product(self, product_id: str) -> dict[str, Any]:
        product = self.catalog.get(product_id)
        if product is None:
            return {"ok": False, "error": f"Product {product_id} not found"}
        self.cart.add_item(product)
        self._emit("cart", "item_added", "add", context={"product_id": product.id})
        return {"ok": True, "cart": self.cart_view()}

    def set_quantity(self, product_id: str, quantity: object) -> dict[str, Any]:
        try:
            qty = coerce_quantity(quantity)
        except ValueError as exc:
            return {"ok": False, "error": str(exc)}
        self.cart.set_quantity(product_id, qty)
        return {"ok": True, "cart": self.cart_view()}

    def increment(self, product_id: str) -> dict[str, Any]:
        self.cart.increment(product_id)
        return {"ok": True, "cart": self.cart_view()}

    def decrement(self, product_id: str) -> dict[str, Any]:
        self.cart.decrement(product_id)
        return {"ok": True, "cart": self.cart_view()}

    def remove_item(self, product_id: str) -> dict[str, Any]:
        self.cart.remove_item(product_id)
        return {"ok": True, "cart": self.cart_view()}

    def clear_cart(self) -> dict[str, Any]:
        self.cart.clear()
        self.payment = None
        return {"ok": True, "cart": self.cart_view()}

    def select_customer(self, customer_id: str) -> dict[str, Any]:
        customer = self.customers.get(customer_id)
        if customer is None:
            return {"ok": False, "error": f"Customer {customer_id} not found"}
        self.cart.set_customer(customer)
        return {"ok": True, "customer": _customer_view(customer)}

    def totals(self) -> CartTotals:
        return summarize(self.cart, self.config.rounding)

    def open_payment(self, method: PaymentMethod | str = PaymentMethod.CASH) -> dict[str, Any]:
        if self.cart.is_empty:
            return self._failed(EmptyCartError())
        self.payment = PaymentAttempt(total=self.totals().total, method=method, rounding=self.config.rounding)
        if self._retry is not None:
            self.payment.pending_sale_id, self.payment.pending_cart = self._retry
        self.error = None
        self._emit("payment", "dialog_opened", "open", amount=self.payment.total, context={"method": self.payment.method.value})
        return {"ok": True, "payment": self._payment_view()}

    def select_payment_method(self, method: PaymentMethod | str) -> dict[str, Any]:
        if self.payment is None:
            return {"ok": False, "error": "Payment dialog is not open"}
        try:
            self.payment.select_method(method)
        except PosError as exc:
            return self._failed(exc)
        return {"ok": True, "payment": self._payment_view()}

    def enter_tendered(self, raw: object) -> dict[str, Any]:
        if self.payment is None:
            return {"ok": False, "error": "Payment dialog is not open"}
        self.payment.enter_tendered(raw)
        return {"ok": True, "payment": self._payment_view()}

    def cancel_payment(self) -> dict[str, Any]:
        self.payment = None
        self.error = None
        return {"ok": True, "cart": self.cart_view()}

    def settle(self) -> dict[str, Any]:
        if self.cart.is_empty:
            return self._failed(EmptyCartError())
        if self.payment is None:
            return {"ok": False, "error": "Open the payment dialog before settling"}

        attempt = self.payment
        attempt.total = self.totals().total
        outcome = self.finalizer.finalize_attempt(self.cart, attempt, operator=self.operator)
        if outcome.validation is not None:
            attempt.state = outcome.validation.state
            attempt.result = outcome.validation
        self._emit_settlement(outcome)
        if not outcome.ok:
            if attempt.pending_sale_id is not None:
                self._retry = (attempt.pending_sale_id, attempt.pending_cart)
            return self._failed(outcome.error)

        self._retry = None
        self.payment = None
        self.error = None
        self.last_sale = outcome.sale
        self.receipt = self.renderer.render(outcome.sale) if self.renderer is not None else None
        return {
            "ok": True,
            "sale": outcome.sale,
            "receipt": self.receipt,
            "cart": self.cart_view(),
        }

    def cart_view(self) -> dict[str, Any]:
        totals = self.totals()
        return {
            "rows": [
                {
                    "product_id": line.product_id,
                    "name": line.name,
                    "unit": line.unit,
                    "unit_price": line.unit_price,
                    "quantity": line.quantity,
                    "subtotal": line_subtotal(line, self.config.rounding),
                }
                for line in self.cart.lines
            ],
            "total": totals.total,
            "item_count": totals.item_count,
            "line_count": totals.line_count,
            "customer": _customer_view(self.cart.customer),
        }

    def render(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "operator": self.operator,
            "cart": self.cart_view(),
            "payment": self._payment_view() if self.payment is not None else None,
            "last_sale_id": self.last_sale.id if self.last_sale else None,
            "error": self.error.message if self.error else None,
            "actions": {
                "can_settle": not self.cart.is_empty,
                "can_clear": not self.cart.is_empty,
                "payment_open": self.payment is not None,
            },
        }

    def _payment_view(self) -> dict[str, Any]:
        attempt = self.payment
        return {
            "total": attempt.total,
            "method": attempt.method.value,
            "tendered": attempt.tendered,
            "change_preview": attempt.preview_change(),
            "state": attempt.state.value,
        }

    def _failed(self, error: PosError) -> dict[str, Any]:
        logger.debug("session %s: %s", self.session_id, error)
        presented = to_user_facing_error(error)
        self.error = presented
        if not (presented.keep_payment_open or presented.reopen_payment):
            self.payment = None
        return {
            "ok": False,
            "error": presented.message,
            "code": presented.code,
            "details": presented.details,
            "trace_id": presented.trace_id,
            "keep_payment_open": presented.keep_payment_open or presented.reopen_payment,
            "cart": self.cart_view(),
        }

    def _emit_settlement(self, outcome: SettlementOutcome) -> None:
        sale = outcome.sale
        self._emit(
            "settlement",
            "sale_settled" if outcome.ok else "settlement_rejected",
            "settle",
            sale_id=sale.id if sale else None,
            amount=sale.total if sale else self.totals().total,
            success=outcome.ok,
            error_code=outcome.error.code if outcome.error else None,
            context={"item_count": sale.item_count if sale else self.totals().item_count},
        )

    def _emit(self, category: str, name: str, action: str, **kwargs: Any) -> None:
        event = build_event(category=category, name=name, action=action, session_id=self.session_id, **kwargs)
        try:
            self.telemetry.emit(event)
        except OSError as exc:
            logger.warning("telemetry event %s dropped: %s", name, exc)


def _customer_view(customer: Customer) -> dict[str, Any]:
    return {"id": customer.id, "name": customer.name, "tier": customer.tier}
