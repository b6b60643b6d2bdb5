from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from dukan.config import AiSettings
from dukan.repositories.sqlite_store import SqliteKeyValueStore
from dukan.repositories.state_repo import StateRepository
from dukan.services.ai_service import AiAssist, build_ai_assist
from dukan.services.ai_tasks import AiTaskRunner
from dukan.services.customer_service import CustomerService
from dukan.services.inventory_service import InventoryService
from dukan.services.invoice_service import InvoiceService
from dukan.services.reporting_service import ReportingService
from dukan.services.sales_service import SalesService
from dukan.services.store_service import StoreService


@dataclass(frozen=True)
class AppContainer:
    store: SqliteKeyValueStore
    repo: StateRepository
    ai: AiAssist
    tasks: AiTaskRunner
    settings: StoreService
    inventory: InventoryService
    customers: CustomerService
    sales: SalesService
    invoices: InvoiceService
    reporting: ReportingService


def build_container(
    db_path: Path | str,
    ai_settings: AiSettings | None = None,
    ai: AiAssist | None = None,
    credit_overpayment: bool = False,
) -> AppContainer:
    store = SqliteKeyValueStore(db_path)
    store.init_db()
    repo = StateRepository(store)

    ai = ai or build_ai_assist(ai_settings or AiSettings.from_env())
    customers = CustomerService(repo)

    return AppContainer(
        store=store,
        repo=repo,
        ai=ai,
        tasks=AiTaskRunner(),
        settings=StoreService(repo),
        inventory=InventoryService(repo, ai),
        customers=customers,
        sales=SalesService(repo, credit_overpayment=credit_overpayment),
        invoices=InvoiceService(),
        reporting=ReportingService(repo, customers),
    )
