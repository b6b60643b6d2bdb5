from __future__ import annotations

import base64
import logging
import uuid
from typing import Sequence

from dukan.domain.errors import AppError, NotFoundError, ValidationError
from dukan.domain.models import Product, SaleUnit
from dukan.domain.values import parse_amount, parse_quantity
from dukan.services.ai_service import AiAssist, DisabledAiAssist, fallback_name_order

log = logging.getLogger(__name__)

IMAGE_PROMPT = "Professional product photo of {name} on a white background"


def apply_name_order(products: Sequence[Product], ordered_names: Sequence[str]) -> list[Product]:
    """Sort products to follow ``ordered_names``; unknown names go last, in their current order."""
    rank: dict[str, int] = {}
    for idx, name in enumerate(ordered_names):
        rank.setdefault(name, idx)
    tail = len(ordered_names)
    return sorted(products, key=lambda p: rank.get(p.name, tail))


class InventoryService:
    def __init__(self, repo, ai: AiAssist | None = None):
        self.repo = repo
        self.ai = ai or DisabledAiAssist()

    def list_products(self) -> list[Product]:
        return self.repo.list_products()

    def get_product(self, product_id: str) -> Product:
        p = self.repo.get_product_by_id(product_id)
        if not p:
            raise NotFoundError("Product not found.")
        return p

    def search_products(self, query: str, in_stock_only: bool = False) -> list[Product]:
        query = query or ""
        return [
            p for p in self.repo.list_products()
            if query in p.name and (not in_stock_only or p.quantity > 0)
        ]

    def add_product(
        self,
        name: str,
        quantity: int,
        unit: SaleUnit | str,
        purchase_price: float,
        sell_price: float,
        image: str = "",
    ) -> Product:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Product name is required.")
        qty = parse_quantity(quantity, "Quantity")
        purchase = parse_amount(purchase_price, "Purchase price")
        sell = parse_amount(sell_price, "Sell price")
        if qty < 0:
            raise ValidationError("Quantity must be >= 0.")
        if purchase < 0 or sell < 0:
            raise ValidationError("Prices must be >= 0.")
        try:
            sale_unit = SaleUnit(unit)
        except ValueError:
            raise ValidationError(f"Unknown sale unit: {unit}") from None

        product = Product(
            id=uuid.uuid4().hex,
            name=name,
            quantity=qty,
            unit=sale_unit,
            purchase_price=purchase,
            sell_price=sell,
            image=image or "",
        )
        products = self.repo.list_products()
        products.append(product)
        self.repo.save_products(products)
        log.info("product_added id=%s name=%s qty=%s", product.id, product.name, product.quantity)
        return product

    def generate_product_image(self, name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Enter the product name first.")
        image = self.ai.request_image(IMAGE_PROMPT.format(name=name))
        return "data:image/png;base64," + base64.b64encode(image).decode("ascii")

    def reorder_by_category(self) -> list[Product]:
        products = self.repo.list_products()
        names = [p.name for p in products]
        try:
            ordered_names = self.ai.request_category_sort(names)
        except AppError as e:
            log.warning("category_sort_fallback error=%s", e)
            ordered_names = fallback_name_order(names)

        reordered = apply_name_order(products, ordered_names)
        self.repo.save_products(reordered)
        return reordered
