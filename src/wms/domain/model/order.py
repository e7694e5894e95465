"""SalesOrder aggregate.

The SalesOrder owns its lines. Line and order statuses are never stored:
they are derived from ``(ordered_qty, shipped_qty)`` and from the lines,
so they cannot drift from the quantities they describe.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from wms.domain.exceptions import ValidationError


class SalesOrderLineStatus(Enum):
    OPEN = "open"
    PARTIAL = "partial"
    CLOSED = "closed"


class SalesOrderStatus(Enum):
    OPEN = "open"
    PACKED = "packed"
    CLOSED = "closed"
    CANCELED = "canceled"


def derive_line_status(ordered_qty: int, shipped_qty: int) -> SalesOrderLineStatus:
    if shipped_qty >= ordered_qty > 0:
        return SalesOrderLineStatus.CLOSED
    if shipped_qty > 0:
        return SalesOrderLineStatus.PARTIAL
    return SalesOrderLineStatus.OPEN


def derive_order_status(line_statuses: Iterable[SalesOrderLineStatus]) -> SalesOrderStatus:
    """Closed when every line is closed, packed when any line is partial.

    A mix of open and closed lines with nothing partial is still open.
    """
    statuses = list(line_statuses)
    if all(status == SalesOrderLineStatus.CLOSED for status in statuses):
        return SalesOrderStatus.CLOSED
    if any(status == SalesOrderLineStatus.PARTIAL for status in statuses):
        return SalesOrderStatus.PACKED
    return SalesOrderStatus.OPEN


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SalesOrderLine:
    """One SKU on a sales order.

    Mutable only via ``ship()``. ``ordered_qty`` and the commercial
    fields are fixed at creation.
    """

    id: str
    so_id: str
    sku: str
    ordered_qty: int
    shipped_qty: int = 0
    product_name: str | None = None
    unit: str | None = None
    unit_price: Decimal | None = None
    amount: Decimal | None = None
    tax_amount: Decimal | None = None
    tax_label: str | None = None
    currency: str | None = None
    tax_type_id: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def status(self) -> SalesOrderLineStatus:
        return derive_line_status(self.ordered_qty, self.shipped_qty)

    @property
    def remaining_quantity(self) -> int:
        """Unshipped quantity; this is what still holds a reservation."""
        return max(0, self.ordered_qty - self.shipped_qty)

    def ship(self, qty: int, shipped_at: datetime) -> int:
        """Record *qty* more units shipped, capped at ``ordered_qty``.

        Returns the previous shipped quantity.
        """
        if qty <= 0:
            raise ValidationError("Ship quantity must be positive")
        previous = self.shipped_qty
        self.shipped_qty = min(self.ordered_qty, self.shipped_qty + qty)
        self.updated_at = shipped_at
        return previous


@dataclass
class SalesOrder:
    """Aggregate root for sales orders.

    Built by the create handler once inventory has been reserved and an
    order number claimed; the dataclass itself performs no validation so
    repositories can hand back stored copies unchanged.
    """

    id: str
    tenant_id: str
    customer_id: str
    customer_name: str
    order_number: str
    order_date: str
    order_sequence: int | None
    lines: list[SalesOrderLine]
    memo: str | None = None
    promised_date: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    confirmed_at: datetime | None = None
    updated_at: datetime = field(default_factory=_utcnow)
    canceled_at: datetime | None = None

    # --- Derived state --------------------------------------------------------

    @property
    def status(self) -> SalesOrderStatus:
        if self.canceled_at is not None:
            return SalesOrderStatus.CANCELED
        return derive_order_status(line.status for line in self.lines)

    @property
    def is_canceled(self) -> bool:
        return self.canceled_at is not None

    @property
    def remaining_by_sku(self) -> dict[str, int]:
        """Unshipped quantity per SKU across all lines."""
        result: dict[str, int] = {}
        for line in self.lines:
            if line.remaining_quantity > 0:
                result[line.sku] = result.get(line.sku, 0) + line.remaining_quantity
        return result

    # --- State transitions ----------------------------------------------------

    def cancel(self, canceled_at: datetime) -> None:
        """Mark the order canceled.

        Inventory release for unshipped quantities must happen *before*
        calling this (coordinated by the cancel handler).
        """
        if self.is_canceled:
            raise ValidationError(f"Sales order {self.id} is already canceled")
        self.canceled_at = canceled_at
        self.updated_at = canceled_at

    def record_shipment(self, line_id: str, qty: int, shipped_at: datetime) -> int:
        """Ship *qty* units on one line; returns the line's previous shipped qty."""
        if self.is_canceled:
            raise ValidationError(
                f"Cannot record shipment on canceled sales order {self.id}"
            )
        line = self.find_line(line_id)
        if line is None:
            raise ValidationError(f"Line '{line_id}' not found on sales order {self.id}")
        previous = line.ship(qty, shipped_at)
        self.updated_at = shipped_at
        return previous

    def find_line(self, line_id: str) -> SalesOrderLine | None:
        for line in self.lines:
            if line.id == line_id:
                return line
        return None
