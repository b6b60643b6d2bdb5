from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Mapping, Optional, Union

from dukan.domain.cart import Cart
from dukan.domain.errors import (
    InsufficientStockError,
    InvariantViolation,
    NotFoundError,
    ValidationError,
)
from dukan.domain.models import Sale, SaleItem
from dukan.domain.values import parse_amount, parse_quantity
from dukan.repositories.unit_of_work import RepositoryUnitOfWork, UnitOfWork

log = logging.getLogger("dukan.sales")

CartLike = Union[Cart, Mapping[str, int]]


def _cart_lines(cart: CartLike) -> list[tuple[str, int]]:
    if isinstance(cart, Cart):
        return list(cart)
    return list(cart.items())


class SalesService:
    def __init__(
        self,
        repo,
        uow_factory: Callable[[], UnitOfWork] | None = None,
        clock: Callable[[], datetime] = datetime.now,
        credit_overpayment: bool = False,
    ):
        self.repo = repo
        self.uow_factory = uow_factory or (lambda: RepositoryUnitOfWork(repo))
        self.clock = clock
        # When False an overpaid credit sale leaves the customer's debt untouched.
        self.credit_overpayment = credit_overpayment

    # ---------- Cart ----------
    def new_cart(self) -> Cart:
        return Cart()

    def _product_for_cart(self, product_id: str):
        product = self.repo.get_product_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found.")
        return product

    def add_to_cart(self, cart: Cart, product_id: str, qty: int = 1) -> int:
        return cart.add_line(self._product_for_cart(product_id), qty)

    def set_cart_quantity(self, cart: Cart, product_id: str, qty: int) -> int:
        return cart.set_quantity(self._product_for_cart(product_id), qty)

    def cart_total(self, cart: CartLike) -> float:
        total = 0.0
        for product_id, qty in _cart_lines(cart):
            product = self.repo.get_product_by_id(product_id)
            if product:
                total += product.sell_price * parse_quantity(qty)
        return total

    # ---------- Checkout ----------
    def checkout(self, cart: CartLike, customer_id: Optional[str] = None, amount_paid: float = 0.0) -> Sale:
        lines = [(pid, parse_quantity(qty)) for pid, qty in _cart_lines(cart)]
        if not lines:
            raise ValidationError("Cart is empty.")
        for _pid, qty in lines:
            if qty <= 0:
                raise ValidationError("Qty must be >= 1.")
        paid = parse_amount(amount_paid, "Amount paid")
        if paid < 0:
            raise ValidationError("Amount paid must be >= 0.")

        products = self.repo.list_products()
        by_id = {p.id: p for p in products}

        items: list[SaleItem] = []
        qty_by_product: dict[str, int] = {}
        for product_id, qty in lines:
            product = by_id.get(product_id)
            if product is None:
                log.error("checkout_missing_product product_id=%s", product_id)
                raise InvariantViolation(f"Product {product_id} disappeared before checkout.")
            items.append(SaleItem(product=product, quantity=qty))
            qty_by_product[product_id] = qty_by_product.get(product_id, 0) + qty

        total = sum(it.line_total for it in items)

        updated_products = []
        for p in products:
            sold = qty_by_product.get(p.id, 0)
            if sold and p.quantity - sold < 0:
                raise InsufficientStockError(f"Not enough stock for {p.name}. Available: {p.quantity}")
            updated_products.append(p if not sold else replace(p, quantity=p.quantity - sold))

        customer = None
        updated_customers = None
        if customer_id is not None:
            customers = self.repo.list_customers()
            customer = next((c for c in customers if c.id == customer_id), None)
            if customer is None:
                log.error("checkout_missing_customer customer_id=%s", customer_id)
                raise InvariantViolation(f"Customer {customer_id} disappeared before checkout.")
            delta = self._debt_delta(total, paid)
            updated_customers = [
                replace(c, debt=c.debt + delta) if c.id == customer_id else c for c in customers
            ]

        sale = Sale(
            id=uuid.uuid4().hex,
            date=self.clock().replace(microsecond=0).isoformat(),
            items=tuple(items),
            total=total,
            amount_paid=paid,
            customer=customer,
        )

        with self.uow_factory() as uow:
            uow.stage_products(updated_products)
            if updated_customers is not None:
                uow.stage_customers(updated_customers)
            uow.append_sale(sale)

        log.info(
            "sale_created sale_id=%s items=%s total=%.2f paid=%.2f customer=%s",
            sale.id, len(items), total, paid, customer_id,
        )
        return sale

    def _debt_delta(self, total: float, paid: float) -> float:
        delta = total - paid
        if delta < 0 and not self.credit_overpayment:
            return 0.0
        return delta

    # ---------- History ----------
    def list_sales(self) -> list[Sale]:
        return self.repo.list_sales()

    def get_sale(self, sale_id: str) -> Sale:
        sale = self.repo.get_sale(sale_id)
        if not sale:
            raise NotFoundError("Sale not found.")
        return sale
