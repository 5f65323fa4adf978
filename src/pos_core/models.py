from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"


class Product(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: str
    name: str
    barcode: str = ""
    price: Decimal = Field(ge=0, decimal_places=2)
    category: str = ""
    stock: int = Field(default=0, ge=0)
    unit: str = "pz"


class Customer(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: str
    name: str
    phone: str = ""
    email: str = ""
    tier: str = "general"


class CartLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    name: str
    unit_price: Decimal = Field(ge=0, decimal_places=2)
    unit: str = "pz"
    quantity: int = Field(gt=0)

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> "CartLine":
        return cls(
            product_id=product.id,
            name=product.name,
            unit_price=product.price,
            unit=product.unit,
            quantity=quantity,
        )


class CashPayment(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: Literal[PaymentMethod.CASH] = PaymentMethod.CASH
    tendered: Decimal = Field(ge=0)
    change: Decimal = Field(ge=0)


class CardPayment(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: Literal[PaymentMethod.CARD] = PaymentMethod.CARD


class TransferPayment(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: Literal[PaymentMethod.TRANSFER] = PaymentMethod.TRANSFER


Payment = Annotated[Union[CashPayment, CardPayment, TransferPayment], Field(discriminator="method")]


class SaleLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    name: str
    unit_price: Decimal
    unit: str
    quantity: int = Field(gt=0)
    subtotal: Decimal


class Sale(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    lines: tuple[SaleLine, ...]
    total: Decimal
    item_count: int
    customer: Customer
    payment: Payment
    created_at: datetime
    operator: str
    currency: str = "MXN"

    @property
    def payment_method(self) -> PaymentMethod:
        return self.payment.method

    @property
    def tendered(self) -> Decimal | None:
        if isinstance(self.payment, CashPayment):
            return self.payment.tendered
        return None

    @property
    def change(self) -> Decimal | None:
        if isinstance(self.payment, CashPayment):
            return self.payment.change
        return None
