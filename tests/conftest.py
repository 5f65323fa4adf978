from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = BASE_DIR / "src"

sys.path.insert(0, str(SRC_DIR))

from pos_core.collaborators import InMemoryCatalog, InMemoryCustomerDirectory, InMemorySaleSink  # noqa: E402
from pos_core.models import Customer, Product  # noqa: E402


def _product(pid: str, name: str, barcode: str, price: str, category: str, stock: int) -> Product:
    return Product(id=pid, name=name, barcode=barcode, price=Decimal(price), category=category, stock=stock, unit="kg")


@pytest.fixture()
def products() -> list[Product]:
    return [
        _product("1", "Manzana Roja", "7501234567890", "25.50", "Frutas", 100),
        _product("2", "Plátano Dominico", "7501234567891", "18.00", "Frutas", 50),
        _product("3", "Naranja Valencia", "7501234567892", "22.00", "Frutas", 75),
        _product("4", "Papaya Maradol", "7501234567893", "35.00", "Frutas", 30),
        _product("5", "Jitomate", "7501234567894", "28.50", "Verduras", 40),
        _product("6", "Cebolla Blanca", "7501234567895", "20.00", "Verduras", 25),
        _product("7", "Aguacate Hass", "7501234567896", "85.00", "Frutas", 20),
        _product("8", "Limón con Semilla", "7501234567897", "15.00", "Frutas", 35),
    ]


@pytest.fixture()
def customers() -> list[Customer]:
    return [
        Customer(id="1", name="Cliente General", tier="general"),
        Customer(id="2", name="María González", phone="555-0123", email="maria@email.com", tier="regular"),
        Customer(id="3", name="Juan Pérez", phone="555-0124", email="juan@email.com", tier="regular"),
        Customer(id="4", name="Ana Martínez", phone="555-0125", email="ana@email.com", tier="premium"),
    ]


@pytest.fixture()
def catalog(products: list[Product]) -> InMemoryCatalog:
    return InMemoryCatalog(products=products)


@pytest.fixture()
def directory(customers: list[Customer]) -> InMemoryCustomerDirectory:
    return InMemoryCustomerDirectory(customers)


@pytest.fixture()
def sink() -> InMemorySaleSink:
    return InMemorySaleSink()


@pytest.fixture()
def apple() -> Product:
    return Product(id="1", name="Apple", barcode="0001", price=Decimal("25.50"), category="Fruit", stock=10, unit="kg")


@pytest.fixture()
def general_customer(customers: list[Customer]) -> Customer:
    return customers[0]
