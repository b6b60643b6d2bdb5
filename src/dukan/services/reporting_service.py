from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from dukan.services.customer_service import CustomerService


@dataclass(frozen=True)
class DashboardSummary:
    products_count: int
    customers_count: int
    sales_count: int
    revenue_total: float
    paid_total: float
    outstanding_debt: float


class ReportingService:
    def __init__(self, repo, customers: CustomerService | None = None):
        self.repo = repo
        self.customers = customers or CustomerService(repo)

    def dashboard_summary(self) -> DashboardSummary:
        sales = self.repo.list_sales()
        return DashboardSummary(
            products_count=len(self.repo.list_products()),
            customers_count=len(self.customers.list_customers()),
            sales_count=len(sales),
            revenue_total=sum(s.total for s in sales),
            paid_total=sum(s.amount_paid for s in sales),
            outstanding_debt=self.customers.total_outstanding_debt(),
        )

    def export_sales_report_excel(self, path: str | Path) -> Path:
        wb = Workbook()

        def money(cell):
            cell.number_format = "#,##0.00"

        def bold_row(ws, r):
            for c in ws[r]:
                c.font = Font(bold=True)

        def set_widths(ws, widths: dict[str, int]):
            for col, w in widths.items():
                ws.column_dimensions[col].width = w

        def add_table(ws, name: str, end_row: int, end_col: int):
            if end_row < 2:
                return
            ref = f"A1:{get_column_letter(end_col)}{end_row}"
            tab = Table(displayName=name, ref=ref)
            tab.tableStyleInfo = TableStyleInfo(
                name="TableStyleMedium9",
                showRowStripes=True,
                showColumnStripes=False,
            )
            ws.add_table(tab)

        summary = self.dashboard_summary()

        # -------- 1) Summary --------
        ws = wb.active
        ws.title = "Summary"
        ws["A1"] = "Summary"
        ws["A1"].font = Font(bold=True, size=14)
        rows = [
            ("Products", summary.products_count),
            ("Customers", summary.customers_count),
            ("Sales", summary.sales_count),
            ("Revenue", summary.revenue_total),
            ("Collected", summary.paid_total),
            ("Outstanding debt", summary.outstanding_debt),
        ]
        for idx, (label, value) in enumerate(rows, start=3):
            ws.cell(row=idx, column=1, value=label)
            cell = ws.cell(row=idx, column=2, value=value)
            if isinstance(value, float):
                money(cell)
        set_widths(ws, {"A": 22, "B": 16})

        # -------- 2) Sales --------
        ws = wb.create_sheet("Sales")
        ws.append(["Sale", "Date", "Customer", "Items", "Total", "Paid", "Remaining"])
        bold_row(ws, 1)
        for s in self.repo.list_sales():
            ws.append([
                s.id,
                s.date,
                s.customer.name if s.customer else "",
                sum(it.quantity for it in s.items),
                s.total,
                s.amount_paid,
                s.remaining,
            ])
            for col in (5, 6, 7):
                money(ws.cell(row=ws.max_row, column=col))
        add_table(ws, "SalesTable", ws.max_row, 7)
        set_widths(ws, {"A": 34, "B": 20, "C": 24, "D": 8, "E": 12, "F": 12, "G": 12})

        # -------- 3) Debtors --------
        ws = wb.create_sheet("Debtors")
        ws.append(["Customer", "Phone", "Debt"])
        bold_row(ws, 1)
        debtors = sorted((c for c in self.repo.list_customers() if c.debt > 0), key=lambda c: -c.debt)
        for c in debtors:
            ws.append([c.name, c.phone, c.debt])
            money(ws.cell(row=ws.max_row, column=3))
        add_table(ws, "DebtorsTable", ws.max_row, 3)
        set_widths(ws, {"A": 28, "B": 18, "C": 12})

        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        wb.save(target)
        return target
