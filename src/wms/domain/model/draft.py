"""SalesOrderDraft: a saved, not yet submitted, order form.

Drafts share the order's shape but never reserve stock or consume an
order number.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class SalesOrderDraftLine:
    sku: str
    ordered_qty: int
    product_name: str | None = None
    unit: str | None = None
    unit_price: Decimal | None = None
    amount: Decimal | None = None
    tax_amount: Decimal | None = None
    tax_label: str | None = None
    currency: str | None = None
    tax_type_id: str | None = None


@dataclass
class SalesOrderDraft:
    id: str
    tenant_id: str
    customer_id: str
    shipping_mode: str
    lines: list[SalesOrderDraftLine]
    created_at: datetime
    updated_at: datetime
    customer_name: str | None = None
    order_number: str | None = None
    order_date: str | None = None
    memo: str | None = None
    promised_date: str | None = None
    shipping_note: str | None = None
    warehouse: str = ""
    status: str = field(default="draft", init=False)
