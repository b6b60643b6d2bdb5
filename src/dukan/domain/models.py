from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SaleUnit(str, Enum):
    BOX = "box"
    KILO = "kilo"


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    quantity: int
    unit: SaleUnit
    purchase_price: float
    sell_price: float
    image: str = ""


@dataclass(frozen=True)
class Customer:
    id: str
    name: str
    phone: str
    debt: float = 0.0


@dataclass(frozen=True)
class SaleItem:
    product: Product
    quantity: int

    @property
    def line_total(self) -> float:
        return self.product.sell_price * self.quantity


@dataclass(frozen=True)
class Sale:
    id: str
    date: str
    items: tuple[SaleItem, ...]
    total: float
    amount_paid: float
    customer: Optional[Customer] = None

    @property
    def remaining(self) -> float:
        return self.total - self.amount_paid


@dataclass(frozen=True)
class StoreInfo:
    name: str
    phone: str
