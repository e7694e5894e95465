"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from wms.domain.exceptions import ValidationError

DEFAULT_TENANT_ID = "default"

_DATE_KEY_PATTERN = re.compile(r"^\d{8}$")
_ORDER_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def normalize_quantity(value: int | float | Decimal | None) -> int:
    """Round half-up to a non-negative integer. Non-finite input becomes 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(0, math.floor(number + 0.5))


def normalize_sku(value: str) -> str:
    return value.strip().upper()


def normalize_tenant_id(value: str | None, default: str = DEFAULT_TENANT_ID) -> str:
    if not isinstance(value, str):
        return default
    trimmed = value.strip()
    return trimmed or default


def clean_text(value: str | None) -> str | None:
    """Trim a string; blank or non-string input becomes None."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def to_decimal(value: int | float | str | Decimal | None) -> Decimal | None:
    """Coerce an optional numeric amount to Decimal, dropping non-finite input."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return amount if amount.is_finite() else None


@dataclass(frozen=True)
class OrderDateContext:
    """A business date in both compact (YYYYMMDD) and ISO (YYYY-MM-DD) form."""

    date_key: str
    order_date: str

    def __post_init__(self) -> None:
        if not _DATE_KEY_PATTERN.match(self.date_key):
            raise ValidationError(f"Invalid date key: {self.date_key!r}")
        if not _ORDER_DATE_PATTERN.match(self.order_date):
            raise ValidationError(f"Invalid order date: {self.order_date!r}")
        if self.order_date.replace("-", "") != self.date_key:
            raise ValidationError(
                f"Date key {self.date_key} does not match order date {self.order_date}"
            )

    @staticmethod
    def of(year: int, month: int, day: int) -> OrderDateContext:
        return OrderDateContext(
            date_key=f"{year:04d}{month:02d}{day:02d}",
            order_date=f"{year:04d}-{month:02d}-{day:02d}",
        )


@dataclass(frozen=True)
class SalesOrderNumberContext:
    """Sequencing key: one counter per tenant per business day."""

    tenant_id: str
    date_key: str
    order_date: str

    @staticmethod
    def build(
        date_context: OrderDateContext,
        tenant_id: str | None = None,
        default_tenant_id: str = DEFAULT_TENANT_ID,
    ) -> SalesOrderNumberContext:
        return SalesOrderNumberContext(
            tenant_id=normalize_tenant_id(tenant_id, default_tenant_id),
            date_key=date_context.date_key,
            order_date=date_context.order_date,
        )


@dataclass(frozen=True)
class AllocatedOrderNumber:
    """Result of peeking or allocating an order number."""

    tenant_id: str
    date_key: str
    order_date: str
    sequence: int
    order_number: str
