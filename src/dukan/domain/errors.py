class AppError(Exception):
    """Base app error."""


class ValidationError(AppError):
    pass


class NotFoundError(AppError):
    pass


class InsufficientStockError(AppError):
    pass


class InvariantViolation(AppError):
    """A referenced entity vanished between cart entry and checkout."""


class GenerationError(AppError):
    pass


class StoreNotConfiguredError(AppError):
    pass


class OperationBusyError(AppError):
    pass
