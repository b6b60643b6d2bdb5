from .models import Product, Customer, SaleItem, Sale, StoreInfo, SaleUnit
from .cart import Cart
from .errors import (
    AppError,
    ValidationError,
    NotFoundError,
    InsufficientStockError,
    InvariantViolation,
    GenerationError,
    StoreNotConfiguredError,
    OperationBusyError,
)

__all__ = [
    "Product",
    "Customer",
    "SaleItem",
    "Sale",
    "StoreInfo",
    "SaleUnit",
    "Cart",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "InsufficientStockError",
    "InvariantViolation",
    "GenerationError",
    "StoreNotConfiguredError",
    "OperationBusyError",
]
