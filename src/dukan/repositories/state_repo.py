from __future__ import annotations

from typing import Iterable, Optional

from dukan.domain.models import Customer, Product, Sale, SaleItem, SaleUnit, StoreInfo
from dukan.repositories.sqlite_store import KeyValueStore

STORE_INFO_KEY = "storeInfo"
PRODUCTS_KEY = "products"
CUSTOMERS_KEY = "customers"
SALES_KEY = "sales"


def product_to_record(p: Product) -> dict:
    return {
        "id": p.id,
        "name": p.name,
        "quantity": int(p.quantity),
        "unit": SaleUnit(p.unit).value,
        "purchase_price": float(p.purchase_price),
        "sell_price": float(p.sell_price),
        "image": p.image or "",
    }


def product_from_record(r: dict) -> Product:
    return Product(
        id=str(r["id"]),
        name=str(r["name"]),
        quantity=int(r["quantity"]),
        unit=SaleUnit(r.get("unit", SaleUnit.BOX.value)),
        purchase_price=float(r["purchase_price"]),
        sell_price=float(r["sell_price"]),
        image=str(r.get("image") or ""),
    )


def customer_to_record(c: Customer) -> dict:
    return {"id": c.id, "name": c.name, "phone": c.phone, "debt": float(c.debt)}


def customer_from_record(r: dict) -> Customer:
    return Customer(
        id=str(r["id"]),
        name=str(r["name"]),
        phone=str(r["phone"]),
        debt=float(r.get("debt", 0.0)),
    )


def sale_to_record(s: Sale) -> dict:
    return {
        "id": s.id,
        "date": s.date,
        "items": [{"product": product_to_record(it.product), "quantity": int(it.quantity)} for it in s.items],
        "total": float(s.total),
        "amount_paid": float(s.amount_paid),
        "customer": customer_to_record(s.customer) if s.customer else None,
    }


def sale_from_record(r: dict) -> Sale:
    customer = r.get("customer")
    return Sale(
        id=str(r["id"]),
        date=str(r["date"]),
        items=tuple(
            SaleItem(product=product_from_record(it["product"]), quantity=int(it["quantity"]))
            for it in r.get("items", [])
        ),
        total=float(r["total"]),
        amount_paid=float(r["amount_paid"]),
        customer=customer_from_record(customer) if customer else None,
    )


class StateRepository:
    """Typed access to the four persisted records of the shop."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    # ---------- Store info ----------
    def get_store_info(self) -> Optional[StoreInfo]:
        r = self.store.load(STORE_INFO_KEY)
        if not r:
            return None
        return StoreInfo(name=str(r["name"]), phone=str(r["phone"]))

    def set_store_info(self, info: StoreInfo) -> None:
        self.store.save(STORE_INFO_KEY, {"name": info.name, "phone": info.phone})

    # ---------- Products ----------
    def list_products(self) -> list[Product]:
        return [product_from_record(r) for r in self.store.load(PRODUCTS_KEY, [])]

    def get_product_by_id(self, product_id: str) -> Optional[Product]:
        for p in self.list_products():
            if p.id == product_id:
                return p
        return None

    def save_products(self, products: Iterable[Product]) -> None:
        self.store.save(PRODUCTS_KEY, [product_to_record(p) for p in products])

    # ---------- Customers ----------
    def list_customers(self) -> list[Customer]:
        return [customer_from_record(r) for r in self.store.load(CUSTOMERS_KEY, [])]

    def get_customer_by_id(self, customer_id: str) -> Optional[Customer]:
        for c in self.list_customers():
            if c.id == customer_id:
                return c
        return None

    def save_customers(self, customers: Iterable[Customer]) -> None:
        self.store.save(CUSTOMERS_KEY, [customer_to_record(c) for c in customers])

    # ---------- Sales ----------
    def list_sales(self) -> list[Sale]:
        return [sale_from_record(r) for r in self.store.load(SALES_KEY, [])]

    def get_sale(self, sale_id: str) -> Optional[Sale]:
        for s in self.list_sales():
            if s.id == sale_id:
                return s
        return None

    def commit(
        self,
        products: Optional[Iterable[Product]] = None,
        customers: Optional[Iterable[Customer]] = None,
        sales: Optional[Iterable[Sale]] = None,
    ) -> None:
        records: dict[str, list[dict]] = {}
        if products is not None:
            records[PRODUCTS_KEY] = [product_to_record(p) for p in products]
        if customers is not None:
            records[CUSTOMERS_KEY] = [customer_to_record(c) for c in customers]
        if sales is not None:
            records[SALES_KEY] = [sale_to_record(s) for s in sales]
        self.store.save_many(records)
