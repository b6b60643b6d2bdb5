from .ai_service import GeminiAssist, DisabledAiAssist, build_ai_assist
from .ai_tasks import AiTaskRunner, TaskResult
from .customer_service import CustomerService
from .inventory_service import InventoryService
from .invoice_service import InvoiceService
from .reporting_service import ReportingService
from .sales_service import SalesService
from .store_service import StoreService

__all__ = [
    "GeminiAssist",
    "DisabledAiAssist",
    "build_ai_assist",
    "AiTaskRunner",
    "TaskResult",
    "CustomerService",
    "InventoryService",
    "InvoiceService",
    "ReportingService",
    "SalesService",
    "StoreService",
]
