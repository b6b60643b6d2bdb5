from pathlib import Path
from urllib.parse import parse_qs, unquote, urlparse

import pytest
from openpyxl import load_workbook

from dukan.domain.errors import StoreNotConfiguredError, ValidationError
from dukan.domain.models import StoreInfo
from dukan.services.customer_service import CustomerService
from dukan.services.inventory_service import InventoryService
from dukan.services.invoice_service import InvoiceService
from dukan.services.sales_service import SalesService

STORE = StoreInfo(name="Corner & Sons", phone="+963 11 555")


def _sale(repo, with_customer: bool = True, phone: str = "+963 944 000"):
    inv = InventoryService(repo)
    a = inv.add_product("Olive Oil", 5, "box", 8.0, 12.5)
    b = inv.add_product("Za'atar #1", 10, "kilo", 2.0, 3.0)
    customer_id = None
    if with_customer:
        customer_id = CustomerService(repo).add_customer("Ali & Co", phone).id
    return SalesService(repo).checkout({a.id: 2, b.id: 1}, customer_id=customer_id, amount_paid=20)


def test_build_invoice_projects_lines_and_balance(repo):
    sale = _sale(repo)
    inv = InvoiceService().build_invoice(sale, STORE)

    assert [(l.name, l.quantity, l.line_total) for l in inv.lines] == [("Olive Oil", 2, 25.0), ("Za'atar #1", 1, 3.0)]
    assert inv.total == 28.0
    assert inv.amount_paid == 20.0
    assert inv.remaining == 8.0
    assert inv.customer_name == "Ali & Co"


def test_render_text_for_walk_in_sale(repo):
    sale = _sale(repo, with_customer=False)
    text = InvoiceService().render_text(sale, STORE)

    assert text.splitlines()[0] == "Corner & Sons"
    assert "Walk-in customer" in text
    assert "Total: 28.00" in text
    assert "Amount due: 8.00" in text


def test_share_url_encodes_every_free_text_field(repo):
    sale = _sale(repo)
    url = InvoiceService().share_url(sale, STORE)

    parsed = urlparse(url)
    assert parsed.netloc == "wa.me"
    assert unquote(parsed.path) == "/+963 944 000"
    assert " " not in url
    assert "&" not in url.split("?text=", 1)[1]

    message = parse_qs(parsed.query)["text"][0]
    assert message == InvoiceService().share_message(sale, STORE)
    assert "*Customer:* Ali & Co" in message
    assert "- Za'atar #1 (Qty: 1) - Price: 3.00" in message
    assert "*Remaining:* 8.00" in message


def test_share_url_requires_customer_phone(repo):
    sale = _sale(repo, with_customer=False)
    with pytest.raises(ValidationError, match="No customer phone"):
        InvoiceService().share_url(sale, STORE)


def test_invoice_needs_store_info(repo):
    sale = _sale(repo)
    with pytest.raises(StoreNotConfiguredError):
        InvoiceService().render_text(sale, None)


def test_export_excel_writes_invoice_workbook(repo, tmp_path: Path):
    sale = _sale(repo)
    path = InvoiceService().export_excel(sale, STORE, tmp_path / "out" / "invoice.xlsx")

    ws = load_workbook(path).active
    assert ws["A1"].value == "Corner & Sons"
    assert ws["B4"].value == sale.id
    assert ws["A10"].value == "Olive Oil"
    assert ws["D10"].value == 25.0
    values = [ws.cell(row=r, column=4).value for r in range(13, 17)]
    assert values == [28.0, 28.0, 20.0, 8.0]


def test_rendering_does_not_touch_stored_state(repo):
    sale = _sale(repo)
    before = (repo.list_products(), repo.list_customers(), repo.list_sales())

    svc = InvoiceService()
    svc.render_text(sale, STORE)
    svc.share_url(sale, STORE)

    assert (repo.list_products(), repo.list_customers(), repo.list_sales()) == before
