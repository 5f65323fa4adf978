from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Iterable, Protocol

from .exceptions import CustomerMissingError
from .models import Customer, Product, Sale


class CatalogProvider(Protocol):
    def list_products(self) -> list[Product]: ...

    def search(self, term: str) -> list[Product]: ...

    def get(self, product_id: str) -> Product | None: ...


class CustomerDirectory(Protocol):
    def list_customers(self) -> list[Customer]: ...

    def get(self, customer_id: str) -> Customer | None: ...

    def default_customer(self) -> Customer: ...


class SaleSink(Protocol):
    def record(self, sale: Sale) -> Sale:
        """Persist ``sale`` and return the recorded copy; raise on failure."""
        ...


class ReceiptRenderer(Protocol):
    def render(self, sale: Sale) -> object: ...


def matches_term(product: Product, term: str) -> bool:
    needle = term.strip()
    if not needle:
        return True
    return needle.lower() in product.name.lower() or needle in product.barcode


@dataclass
class InMemoryCatalog:
    products: list[Product] = field(default_factory=list)

    def list_products(self) -> list[Product]:
        return list(self.products)

    def search(self, term: str) -> list[Product]:
        return [product for product in self.products if matches_term(product, term)]

    def get(self, product_id: str) -> Product | None:
        for product in self.products:
            if product.id == product_id:
                return product
        return None


class InMemoryCustomerDirectory:
    def __init__(self, customers: Iterable[Customer], default_customer_id: str | None = None) -> None:
        self._customers = list(customers)
        if not self._customers:
            raise CustomerMissingError("Customer directory needs at least the general customer")
        if default_customer_id is None:
            self._default = self._customers[0]
        else:
            found = self.get(default_customer_id)
            if found is None:
                raise CustomerMissingError(f"Default customer {default_customer_id!r} is not in the directory")
            self._default = found

    def list_customers(self) -> list[Customer]:
        return list(self._customers)

    def get(self, customer_id: str) -> Customer | None:
        for customer in self._customers:
            if customer.id == customer_id:
                return customer
        return None

    def default_customer(self) -> Customer:
        return self._default


@dataclass
class InMemorySaleSink:
    """Keeps recorded sales in a list and numbers them sequentially.

    Recording the same provisional sale id twice returns the first recording,
    the way an idempotency key replay does on the remote store.
    """

    prefix: str = "SALE-"
    fail_with: Exception | None = None
    sales: list[Sale] = field(default_factory=list)
    _recorded: dict[str, Sale] = field(default_factory=dict, repr=False)
    _counter: itertools.count = field(default_factory=lambda: itertools.count(1), repr=False)

    def record(self, sale: Sale) -> Sale:
        if self.fail_with is not None:
            raise self.fail_with
        replay = self._recorded.get(sale.id)
        if replay is not None:
            return replay
        recorded = sale.model_copy(update={"id": f"{self.prefix}{next(self._counter):06d}"})
        self._recorded[sale.id] = recorded
        self.sales.append(recorded)
        return recorded
