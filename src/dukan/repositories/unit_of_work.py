from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol

from dukan.domain.models import Customer, Product, Sale


class UnitOfWork(Protocol):
    def __enter__(self) -> "UnitOfWork": ...
    def __exit__(self, exc_type, exc, tb) -> None: ...
    def stage_products(self, products: Iterable[Product]) -> None: ...
    def stage_customers(self, customers: Iterable[Customer]) -> None: ...
    def append_sale(self, sale: Sale) -> None: ...


@dataclass
class RepositoryUnitOfWork:
    """Collects collection updates and writes them in one commit on exit.

    Nothing is written when the block raises; staged changes are dropped.
    """

    repo: object
    _products: Optional[list[Product]] = field(default=None, init=False)
    _customers: Optional[list[Customer]] = field(default=None, init=False)
    _new_sales: list[Sale] = field(default_factory=list, init=False)

    def __enter__(self) -> "RepositoryUnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.commit()
        self._reset()
        return None

    def stage_products(self, products: Iterable[Product]) -> None:
        self._products = list(products)

    def stage_customers(self, customers: Iterable[Customer]) -> None:
        self._customers = list(customers)

    def append_sale(self, sale: Sale) -> None:
        self._new_sales.append(sale)

    def commit(self) -> None:
        sales = None
        if self._new_sales:
            sales = self.repo.list_sales() + self._new_sales
        self.repo.commit(products=self._products, customers=self._customers, sales=sales)

    def _reset(self) -> None:
        self._products = None
        self._customers = None
        self._new_sales = []
