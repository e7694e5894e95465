"""Application service: Set Inventory use case.

Replaces the full per-warehouse stock list of one SKU, the way an
inventory form re-submits it. Warehouses missing from the new list are
dropped for that SKU. A reserved quantity above the new on-hand is
clamped down to it.
"""

from __future__ import annotations

import structlog

from wms.application.dto import InventoryInput
from wms.domain.model.inventory import InventoryRecord, InventorySummary
from wms.domain.model.value_objects import normalize_quantity
from wms.domain.service.reservation_allocator import ReservationAllocator

logger = structlog.get_logger(__name__)


class SetInventoryHandler:

    def __init__(self, allocator: ReservationAllocator) -> None:
        self._allocator = allocator

    def handle(self, sku: str, inventory: list[InventoryInput]) -> InventorySummary:
        records = [self._to_record(sku, item) for item in inventory]
        ledger = self._allocator.ledger
        with self._allocator.hold(sku):
            ledger.replace_for_sku(sku, records)
            return ledger.summarize(sku)

    def _to_record(self, sku: str, item: InventoryInput) -> InventoryRecord:
        on_hand = normalize_quantity(item.on_hand)
        reserved = normalize_quantity(item.reserved)
        if reserved > on_hand:
            logger.warning(
                "inventory_reserved_clamped",
                sku=sku,
                warehouse_code=item.warehouse_code,
                reserved=reserved,
                on_hand=on_hand,
            )
            reserved = on_hand
        return InventoryRecord(
            sku=sku, warehouse_code=item.warehouse_code, on_hand=on_hand, reserved=reserved
        )
