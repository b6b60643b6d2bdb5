from __future__ import annotations

import math

from dukan.domain.errors import ValidationError


def parse_amount(value: object, label: str) -> float:
    """Finite float from form input; anything else is a ``ValidationError``."""
    if value is None or value == "" or isinstance(value, bool):
        raise ValidationError(f"{label} is required.")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a number.") from None
    if not math.isfinite(amount):
        raise ValidationError(f"{label} must be a finite number.")
    return amount


def parse_quantity(value: object, label: str = "Qty") -> int:
    amount = parse_amount(value, label)
    if amount != int(amount):
        raise ValidationError(f"{label} must be a whole number.")
    return int(amount)
