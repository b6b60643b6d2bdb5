from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font

from dukan.domain.errors import StoreNotConfiguredError, ValidationError
from dukan.domain.models import Sale, StoreInfo

WALK_IN = "Walk-in customer"
RULE = "-" * 36


@dataclass(frozen=True)
class InvoiceLine:
    name: str
    quantity: int
    unit_price: float
    line_total: float


@dataclass(frozen=True)
class Invoice:
    number: str
    date: str
    store_name: str
    store_phone: str
    customer_name: str
    customer_phone: Optional[str]
    lines: tuple[InvoiceLine, ...]
    subtotal: float
    total: float
    amount_paid: float
    remaining: float


class InvoiceService:
    """Read-only views of a finished sale: text, share link and workbook."""

    SHARE_BASE_URL = "https://wa.me/"

    def build_invoice(self, sale: Sale, store_info: Optional[StoreInfo]) -> Invoice:
        if store_info is None:
            raise StoreNotConfiguredError("Store settings are missing. Run the first-time setup.")
        lines = tuple(
            InvoiceLine(
                name=it.product.name,
                quantity=it.quantity,
                unit_price=it.product.sell_price,
                line_total=it.line_total,
            )
            for it in sale.items
        )
        return Invoice(
            number=sale.id,
            date=sale.date[:10],
            store_name=store_info.name,
            store_phone=store_info.phone,
            customer_name=sale.customer.name if sale.customer else WALK_IN,
            customer_phone=sale.customer.phone if sale.customer else None,
            lines=lines,
            subtotal=sale.total,
            total=sale.total,
            amount_paid=sale.amount_paid,
            remaining=sale.remaining,
        )

    def render_text(self, sale: Sale, store_info: Optional[StoreInfo]) -> str:
        inv = self.build_invoice(sale, store_info)
        out = [
            inv.store_name,
            inv.store_phone,
            "",
            f"Invoice no.: {inv.number}",
            f"Date: {inv.date}",
            "Bill to:",
            f"  {inv.customer_name}",
        ]
        if inv.customer_phone:
            out.append(f"  {inv.customer_phone}")
        out.append(RULE)
        out.append(f"{'Product':<16}{'Qty':>4}{'Unit':>8}{'Total':>8}")
        for line in inv.lines:
            out.append(f"{line.name[:16]:<16}{line.quantity:>4}{line.unit_price:>8.2f}{line.line_total:>8.2f}")
        out.append(RULE)
        out.append(f"Subtotal: {inv.subtotal:.2f}")
        out.append(f"Total: {inv.total:.2f}")
        out.append(f"Amount paid: {inv.amount_paid:.2f}")
        out.append(f"Amount due: {inv.remaining:.2f}")
        return "\n".join(out)

    def share_message(self, sale: Sale, store_info: Optional[StoreInfo]) -> str:
        inv = self.build_invoice(sale, store_info)
        message = f"*Invoice from {inv.store_name}*\n"
        message += f"Phone: {inv.store_phone}\n\n"
        if sale.customer:
            message += f"*Customer:* {inv.customer_name}\n"
            message += f"*Customer phone:* {inv.customer_phone}\n\n"
        message += RULE + "\n"
        message += "*Products:*\n"
        for line in inv.lines:
            message += f"- {line.name} (Qty: {line.quantity}) - Price: {line.line_total:.2f}\n"
        message += RULE + "\n"
        message += f"*Total:* {inv.total:.2f}\n"
        message += f"*Paid:* {inv.amount_paid:.2f}\n"
        message += f"*Remaining:* {inv.remaining:.2f}\n\n"
        message += "Thank you for your business!"
        return message

    def share_url(self, sale: Sale, store_info: Optional[StoreInfo]) -> str:
        phone = sale.customer.phone.strip() if sale.customer and sale.customer.phone else ""
        if not phone:
            raise ValidationError("No customer phone number to send the invoice to.")
        message = self.share_message(sale, store_info)
        return f"{self.SHARE_BASE_URL}{quote(phone, safe='')}?text={quote(message, safe='')}"

    def export_excel(self, sale: Sale, store_info: Optional[StoreInfo], path: str | Path) -> Path:
        inv = self.build_invoice(sale, store_info)
        wb = Workbook()
        ws = wb.active
        ws.title = "Invoice"

        ws["A1"] = inv.store_name
        ws["A1"].font = Font(bold=True, size=14)
        ws["A2"] = inv.store_phone
        ws["A4"] = "Invoice no."
        ws["B4"] = inv.number
        ws["A5"] = "Date"
        ws["B5"] = inv.date
        ws["A6"] = "Bill to"
        ws["B6"] = inv.customer_name
        if inv.customer_phone:
            ws["B7"] = inv.customer_phone

        header_row = 9
        for col, title in enumerate(("Product", "Qty", "Unit price", "Total"), start=1):
            cell = ws.cell(row=header_row, column=col, value=title)
            cell.font = Font(bold=True)

        row = header_row + 1
        for line in inv.lines:
            ws.cell(row=row, column=1, value=line.name)
            ws.cell(row=row, column=2, value=line.quantity)
            ws.cell(row=row, column=3, value=line.unit_price).number_format = "#,##0.00"
            ws.cell(row=row, column=4, value=line.line_total).number_format = "#,##0.00"
            row += 1

        row += 1
        for label, value in (
            ("Subtotal", inv.subtotal),
            ("Total", inv.total),
            ("Amount paid", inv.amount_paid),
            ("Amount due", inv.remaining),
        ):
            ws.cell(row=row, column=3, value=label).font = Font(bold=True)
            total_cell = ws.cell(row=row, column=4, value=value)
            total_cell.number_format = "#,##0.00"
            total_cell.alignment = Alignment(horizontal="right")
            row += 1

        ws.column_dimensions["A"].width = 32
        ws.column_dimensions["B"].width = 14
        ws.column_dimensions["C"].width = 14
        ws.column_dimensions["D"].width = 14

        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        wb.save(target)
        return target
