"""Data Transfer Objects: plain containers that cross layer boundaries.

Inputs arrive from the calling layer (CLI, HTTP adapter) already split
into fields but not yet normalized; the handlers trim, upper-case and
round them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from wms.domain.model.inventory import InventoryTotals
from wms.domain.model.order import SalesOrder, SalesOrderLine

Number = int | float | Decimal
DateInput = str | date | datetime


@dataclass(frozen=True)
class SalesOrderLineInput:
    """Input: one requested SKU and quantity, plus optional pricing."""

    sku: str
    ordered_qty: Number
    product_name: str | None = None
    unit: str | None = None
    unit_price: Number | str | None = None
    amount: Number | str | None = None
    tax_amount: Number | str | None = None
    tax_label: str | None = None
    currency: str | None = None
    tax_type_id: str | None = None


@dataclass(frozen=True)
class CreateSalesOrderInput:
    customer_id: str
    lines: list[SalesOrderLineInput]
    tenant_id: str | None = None
    customer_name: str | None = None
    order_number: str | None = None
    order_date: DateInput | None = None
    memo: str | None = None
    promised_date: str | None = None


@dataclass(frozen=True)
class SalesOrderDraftInput:
    customer_id: str
    lines: list[SalesOrderLineInput]
    id: str | None = None
    tenant_id: str | None = None
    customer_name: str | None = None
    order_number: str | None = None
    order_date: str | None = None
    memo: str | None = None
    promised_date: str | None = None
    shipping_mode: str | None = None
    shipping_note: str | None = None
    warehouse: str | None = None


@dataclass(frozen=True)
class DateRangeFilters:
    """Inclusive range on order date; bounds are ISO-8601 strings or datetimes."""

    from_: DateInput | None = None
    to: DateInput | None = None
    tenant_id: str | None = None


SalesOrderListFilters = DateRangeFilters
SalesOrderDraftListFilters = DateRangeFilters


@dataclass(frozen=True)
class SalesShipmentResult:
    order: SalesOrder
    previous_shipped_qty: int
    line: SalesOrderLine


@dataclass(frozen=True)
class InventoryInput:
    """Input: one warehouse's stock for a SKU being (re)submitted."""

    warehouse_code: str
    on_hand: Number
    reserved: Number = 0


@dataclass(frozen=True)
class InventoryLineDTO:
    sku: str
    total: int
    reserved: int
    available: int


@dataclass(frozen=True)
class WarehouseTotalsDTO:
    warehouse_code: str
    on_hand: int
    reserved: int


@dataclass(frozen=True)
class InventoryReportDTO:
    lines: list[InventoryLineDTO] = field(default_factory=list)
    warehouses: list[WarehouseTotalsDTO] = field(default_factory=list)
    overall: InventoryTotals = field(default_factory=InventoryTotals)
