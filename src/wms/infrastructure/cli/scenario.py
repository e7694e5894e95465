"""Scenario files: seed inventory plus a list of orders, as JSON.

::

    {
      "inventory": [{"sku": "A", "warehouseCode": "WH1", "onHand": 10, "reserved": 0}],
      "orders": [{"tenantId": "t1", "customerId": "c1", "orderDate": "2024-05-15",
                  "lines": [{"sku": "A", "orderedQty": 3}]}]
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from wms.application.dto import CreateSalesOrderInput, SalesOrderLineInput
from wms.domain.exceptions import ValidationError
from wms.domain.model.inventory import InventoryRecord


@dataclass(frozen=True)
class Scenario:
    inventory: list[InventoryRecord]
    orders: list[CreateSalesOrderInput]


def load_scenario(path: Path) -> Scenario:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Scenario {path} is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ValidationError(f"Scenario {path} must be a JSON object")

    return Scenario(
        inventory=[_to_record(item) for item in raw.get("inventory", [])],
        orders=[_to_order_input(item) for item in raw.get("orders", [])],
    )


def _to_record(raw: dict) -> InventoryRecord:
    try:
        return InventoryRecord(
            sku=raw["sku"],
            warehouse_code=raw["warehouseCode"],
            on_hand=int(raw.get("onHand", 0)),
            reserved=int(raw.get("reserved", 0)),
        )
    except KeyError as exc:
        raise ValidationError(f"Inventory entry is missing {exc.args[0]!r}") from exc
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid inventory entry {raw!r}: {exc}") from exc


def _to_order_input(raw: dict) -> CreateSalesOrderInput:
    return CreateSalesOrderInput(
        tenant_id=raw.get("tenantId"),
        customer_id=raw.get("customerId", ""),
        customer_name=raw.get("customerName"),
        order_number=raw.get("orderNumber"),
        order_date=raw.get("orderDate"),
        memo=raw.get("memo"),
        promised_date=raw.get("promisedDate"),
        lines=[
            SalesOrderLineInput(
                sku=line.get("sku", ""),
                ordered_qty=line.get("orderedQty", 0),
                product_name=line.get("productName"),
                unit=line.get("unit"),
                unit_price=line.get("unitPrice"),
                amount=line.get("amount"),
                tax_amount=line.get("taxAmount"),
                tax_label=line.get("taxLabel"),
                currency=line.get("currency"),
                tax_type_id=line.get("taxTypeId"),
            )
            for line in raw.get("lines", [])
        ],
    )
