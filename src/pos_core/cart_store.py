from __future__ import annotations

import logging

from .exceptions import CustomerMissingError
from .models import CartLine, Customer, Product
from .money import coerce_quantity

logger = logging.getLogger(__name__)


class CartStore:
    """The in-progress transaction of one operator session.

    Lines are kept in insertion order, one per product id, each with a positive
    quantity. A customer is always attached; ``clear`` keeps it while ``reset``
    goes back to the default one.
    """

    def __init__(self, default_customer: Customer) -> None:
        if default_customer is None:
            raise CustomerMissingError("CartStore requires a default customer")
        self._default_customer = default_customer
        self._customer = default_customer
        self._lines: list[CartLine] = []

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines)

    @property
    def customer(self) -> Customer:
        return self._customer

    @property
    def default_customer(self) -> Customer:
        return self._default_customer

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def get_line(self, product_id: str) -> CartLine | None:
        index = self._index_of(product_id)
        if index is None:
            return None
        return self._lines[index]

    def add_item(self, product: Product) -> CartLine:
        index = self._index_of(product.id)
        if index is None:
            line = CartLine.from_product(product)
            self._lines.append(line)
        else:
            current = self._lines[index]
            line = current.model_copy(update={"quantity": current.quantity + 1})
            self._lines[index] = line
        logger.debug("cart add product_id=%s quantity=%s", product.id, line.quantity)
        return line

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """Set an absolute quantity; zero or less removes the line.

        Raises ValueError for a fractional or non-numeric quantity.
        """
        quantity = coerce_quantity(quantity)
        if quantity <= 0:
            self.remove_item(product_id)
            return
        index = self._index_of(product_id)
        if index is None:
            return
        self._lines[index] = self._lines[index].model_copy(update={"quantity": quantity})

    def increment(self, product_id: str) -> None:
        line = self.get_line(product_id)
        if line is not None:
            self.set_quantity(product_id, line.quantity + 1)

    def decrement(self, product_id: str) -> None:
        line = self.get_line(product_id)
        if line is not None:
            self.set_quantity(product_id, line.quantity - 1)

    def remove_item(self, product_id: str) -> None:
        self._lines = [line for line in self._lines if line.product_id != product_id]

    def clear(self) -> None:
        self._lines = []

    def reset(self) -> None:
        self._lines = []
        self._customer = self._default_customer

    def set_customer(self, customer: Customer | None) -> None:
        if customer is None:
            raise CustomerMissingError()
        self._customer = customer

    def _index_of(self, product_id: str) -> int | None:
        for index, line in enumerate(self._lines):
            if line.product_id == product_id:
                return index
        return None
