from .cart_store import CartStore
from .collaborators import (
    CatalogProvider,
    CustomerDirectory,
    InMemoryCatalog,
    InMemoryCustomerDirectory,
    InMemorySaleSink,
    ReceiptRenderer,
    SaleSink,
)
from .config import ConfigError, PosConfig, load_config
from .exceptions import (
    ApiError,
    CustomerMissingError,
    EmptyCartError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidPaymentMethodError,
    PosError,
    SaleSinkError,
    TransportError,
)
from .http_client import HttpClient
from .logging import configure_logging
from .models import (
    CardPayment,
    CartLine,
    CashPayment,
    Customer,
    PaymentMethod,
    Product,
    Sale,
    SaleLine,
    TransferPayment,
)
from .money import coerce_quantity, format_money, parse_amount, round2
from .payment_validation import PaymentAttempt, PaymentState, PaymentValidationResult, validate_payment
from .pricing import CartTotals, cart_total, item_count, line_subtotal, summarize
from .remote import HttpCatalogProvider, HttpSaleSink
from .sale_finalizer import SaleFinalizer, SettlementOutcome
from .session import PosSession
from .telemetry import TelemetryLogger, build_event
from .ui_errors import UserFacingError, to_user_facing_error

__all__ = [
    "ApiError",
    "CardPayment",
    "CartLine",
    "CartStore",
    "CartTotals",
    "CashPayment",
    "CatalogProvider",
    "ConfigError",
    "Customer",
    "CustomerDirectory",
    "CustomerMissingError",
    "EmptyCartError",
    "HttpCatalogProvider",
    "HttpClient",
    "HttpSaleSink",
    "InMemoryCatalog",
    "InMemoryCustomerDirectory",
    "InMemorySaleSink",
    "InsufficientFundsError",
    "InvalidAmountError",
    "InvalidPaymentMethodError",
    "PaymentAttempt",
    "PaymentMethod",
    "PaymentState",
    "PaymentValidationResult",
    "PosConfig",
    "PosError",
    "PosSession",
    "Product",
    "ReceiptRenderer",
    "Sale",
    "SaleFinalizer",
    "SaleLine",
    "SaleSink",
    "SaleSinkError",
    "SettlementOutcome",
    "TelemetryLogger",
    "TransferPayment",
    "TransportError",
    "UserFacingError",
    "build_event",
    "cart_total",
    "coerce_quantity",
    "configure_logging",
    "format_money",
    "item_count",
    "line_subtotal",
    "load_config",
    "parse_amount",
    "round2",
    "summarize",
    "to_user_facing_error",
    "validate_payment",
]
