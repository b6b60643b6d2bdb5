from __future__ import annotations

from typing import Iterator

from dukan.domain.errors import InsufficientStockError, ValidationError
from dukan.domain.models import Product
from dukan.domain.values import parse_quantity


class Cart:
    """Pending sale lines keyed by product id, in the order they were added.

    Every mutation is checked against the stock of the product passed in, so a
    line can never ask for more than was available when it was entered.
    """

    def __init__(self) -> None:
        self._lines: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[tuple[str, int]]:
        return iter(list(self._lines.items()))

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._lines

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def quantity_of(self, product_id: str) -> int:
        return self._lines.get(product_id, 0)

    def lines(self) -> dict[str, int]:
        return dict(self._lines)

    def add_line(self, product: Product, qty: object = 1) -> int:
        qty = parse_quantity(qty)
        if qty <= 0:
            raise ValidationError("Qty must be >= 1.")
        return self.set_quantity(product, self.quantity_of(product.id) + qty)

    def set_quantity(self, product: Product, qty: object) -> int:
        qty = parse_quantity(qty)
        if qty < 0:
            raise ValidationError("Qty must be >= 0.")
        if qty > int(product.quantity):
            raise InsufficientStockError(
                f"Not enough stock for {product.name}. Available: {product.quantity}"
            )
        if qty == 0:
            self._lines.pop(product.id, None)
        else:
            self._lines[product.id] = qty
        return qty

    def remove_line(self, product_id: str) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()
