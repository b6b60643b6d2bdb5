from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dukan.application.container import AppContainer, build_container
from dukan.config import get_app_paths
from dukan.domain.errors import AppError, StoreNotConfiguredError
from dukan.logging_config import setup_logging

log = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dukan", description="Shop inventory, customers and sales.")
    parser.add_argument("--db", type=Path, default=None, help="Database file (defaults to the app data folder).")
    sub = parser.add_subparsers(dest="command", required=True)

    setup = sub.add_parser("setup", help="Save the store name and phone.")
    setup.add_argument("name")
    setup.add_argument("phone")

    sub.add_parser("summary", help="Show dashboard totals.")
    sub.add_parser("products", help="List inventory.")
    sub.add_parser("sort-inventory", help="Reorder inventory by category.")

    invoice = sub.add_parser("invoice", help="Print an invoice.")
    invoice.add_argument("sale_id")
    invoice.add_argument("--xlsx", type=Path, default=None, help="Also write the invoice workbook here.")
    invoice.add_argument("--share", action="store_true", help="Print the WhatsApp share link.")

    report = sub.add_parser("report", help="Export the sales report workbook.")
    report.add_argument("path", type=Path)
    return parser


def run(app: AppContainer, args: argparse.Namespace) -> int:
    if args.command == "setup":
        info = app.settings.setup_store(args.name, args.phone)
        print(f"Store saved: {info.name} ({info.phone})")
        return 0

    store_info = app.settings.get_store_info()

    if args.command == "summary":
        s = app.reporting.dashboard_summary()
        print(f"Products: {s.products_count}")
        print(f"Customers: {s.customers_count}")
        print(f"Sales: {s.sales_count}")
        print(f"Revenue: {s.revenue_total:.2f}")
        print(f"Outstanding debt: {s.outstanding_debt:.2f}")
    elif args.command == "products":
        for p in app.inventory.list_products():
            print(f"{p.name}\t{p.quantity} {p.unit.value}\t{p.sell_price:.2f}")
    elif args.command == "sort-inventory":
        for p in app.inventory.reorder_by_category():
            print(p.name)
    elif args.command == "invoice":
        sale = app.sales.get_sale(args.sale_id)
        print(app.invoices.render_text(sale, store_info))
        if args.xlsx:
            print(f"Saved: {app.invoices.export_excel(sale, store_info, args.xlsx)}")
        if args.share:
            print(app.invoices.share_url(sale, store_info))
    elif args.command == "report":
        print(f"Saved: {app.reporting.export_sales_report_excel(args.path)}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    paths = get_app_paths()
    setup_logging(paths.logs_dir, level=logging.INFO)

    app = build_container(args.db or paths.db_path)
    try:
        return run(app, args)
    except StoreNotConfiguredError as e:
        print(f"{e} (dukan setup NAME PHONE)", file=sys.stderr)
        return 2
    except AppError as e:
        log.warning("command_failed command=%s error=%s", args.command, e)
        print(str(e), file=sys.stderr)
        return 1
    finally:
        app.tasks.shutdown(wait=False)


if __name__ == "__main__":
    sys.exit(main())
