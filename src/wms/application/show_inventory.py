"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from wms.application.dto import InventoryLineDTO, InventoryReportDTO, WarehouseTotalsDTO
from wms.domain.service.inventory_ledger import InventoryLedger


class ShowInventoryHandler:

    def __init__(self, ledger: InventoryLedger) -> None:
        self._ledger = ledger

    def handle(self) -> InventoryReportDTO:
        lines = []
        for sku in self._ledger.skus():
            totals = self._ledger.totals_for_sku(sku)
            lines.append(
                InventoryLineDTO(
                    sku=sku,
                    total=totals.on_hand,
                    reserved=totals.reserved,
                    available=totals.available,
                )
            )
        warehouses = [
            WarehouseTotalsDTO(warehouse_code=code, on_hand=t.on_hand, reserved=t.reserved)
            for code, t in sorted(self._ledger.totals_by_warehouse().items())
        ]
        return InventoryReportDTO(lines=lines, warehouses=warehouses, overall=self._ledger.totals())
