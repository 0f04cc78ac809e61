"""Input normalization shared by the services."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any
from uuid import UUID

from worksync.errors import ValidationError

CENTS = Decimal("0.01")

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_valid_email(value: Any) -> bool:
    return isinstance(value, str) and bool(_EMAIL_RE.match(value.strip()))


def normalize_email(value: Any) -> str:
    """Return the canonical (trimmed, lower-case) form of an employee email.

    Raises:
        ValidationError: If the value is empty or not an email address
    """
    if not is_valid_email(value):
        raise ValidationError(f"Invalid employee email: {value!r}")
    return value.strip().lower()


def to_decimal(value: Any, field: str) -> Decimal:
    """Coerce a numeric input to Decimal without going through float."""
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError(f"{field} must be a number, got {value!r}") from None
    elif isinstance(value, float):
        result = Decimal(repr(value))
    else:
        raise ValidationError(f"{field} must be a number, got {type(value).__name__}")

    if not result.is_finite():
        raise ValidationError(f"{field} must be finite")
    return result


def quantize_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_uuid(value: Any, field: str = "id") -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}: {value!r}") from None
