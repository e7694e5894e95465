"""Domain service: Reservation Allocator.

Reserves and releases stock for a SKU across its per-warehouse records
in the InventoryLedger. Reservation is all-or-nothing: either the full
quantity is spread across warehouses or nothing changes.

Each reserve/release runs under the SKU's lock, so the availability
check and the ledger mutation form one critical section. Callers that
need a wider section (e.g. checking several SKUs before reserving) take
the same locks through ``hold()``.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass

import structlog

from wms.domain.exceptions import AllocationError, InsufficientStockError
from wms.domain.model.value_objects import normalize_quantity, normalize_sku
from wms.domain.service.inventory_ledger import InventoryLedger
from wms.domain.service.keyed_locks import KeyedLocks

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Reservation:
    """Units reserved at one warehouse by a single ``reserve`` call."""

    sku: str
    warehouse_code: str
    quantity: int


class ReservationAllocator:

    def __init__(self, ledger: InventoryLedger, locks: KeyedLocks | None = None) -> None:
        self._ledger = ledger
        self._locks = locks if locks is not None else KeyedLocks()

    @property
    def ledger(self) -> InventoryLedger:
        return self._ledger

    def hold(self, *skus: str) -> AbstractContextManager[None]:
        """Hold the locks of every given SKU for the duration of a block."""
        return self._locks.hold(*(normalize_sku(sku) for sku in skus))

    def available(self, sku: str) -> int:
        return self._ledger.totals_for_sku(sku).available

    def reserve(self, sku: str, quantity: int | float) -> list[Reservation]:
        """Reserve ``quantity`` units, most-available warehouse first.

        Returns where the units were taken from. Raises
        InsufficientStockError (no mutation) when the SKU does not have
        enough available stock, and AllocationError when the records
        cannot cover what the totals promised.
        """
        qty = normalize_quantity(quantity)
        if qty == 0:
            return []
        sku = normalize_sku(sku)

        with self.hold(sku):
            available = self.available(sku)
            if qty > available:
                logger.warning(
                    "reservation_rejected", sku=sku, requested=qty, available=available
                )
                raise InsufficientStockError(sku, qty, available)

            records = sorted(
                self._ledger.list_for_sku(sku),
                key=lambda r: (-r.available, r.warehouse_code),
            )
            remaining = qty
            applied: list[tuple[str, int]] = []
            for record in records:
                if remaining <= 0:
                    break
                if record.available <= 0:
                    continue
                delta = self._change_reserved(
                    sku, record.warehouse_code, min(record.available, remaining)
                )
                if delta:
                    applied.append((record.warehouse_code, delta))
                    remaining -= delta

            if remaining > 0:
                for warehouse_code, delta in reversed(applied):
                    self._change_reserved(sku, warehouse_code, -delta)
                logger.error(
                    "allocation_failed", sku=sku, requested=qty, unallocated=remaining
                )
                raise AllocationError(f"Failed to reserve {qty} units for SKU {sku}")

            return [
                Reservation(sku=sku, warehouse_code=warehouse_code, quantity=delta)
                for warehouse_code, delta in applied
            ]

    def release(
        self,
        sku: str,
        quantity: int | float,
        preferred_warehouse: str | None = None,
    ) -> int:
        """Release up to ``quantity`` reserved units and return how many were released.

        The preferred warehouse is drained first, then the remaining
        records by descending reserved quantity. Asking for more than is
        reserved releases everything that is.
        """
        qty = normalize_quantity(quantity)
        if qty == 0:
            return 0
        sku = normalize_sku(sku)

        with self.hold(sku):
            remaining = qty
            if preferred_warehouse:
                remaining -= self._release_from(sku, preferred_warehouse, remaining)

            if remaining > 0:
                records = sorted(
                    self._ledger.list_for_sku(sku),
                    key=lambda r: (-r.reserved, r.warehouse_code),
                )
                for record in records:
                    if remaining <= 0:
                        break
                    remaining -= self._release_from(sku, record.warehouse_code, remaining)

            return qty - remaining

    # --- Internal helpers -----------------------------------------------------

    def _release_from(self, sku: str, warehouse_code: str, quantity: int) -> int:
        record = self._ledger.get(sku, warehouse_code)
        if record is None:
            return 0
        releasable = min(record.reserved, quantity)
        if releasable <= 0:
            return 0
        return -self._change_reserved(sku, warehouse_code, -releasable)

    def _change_reserved(self, sku: str, warehouse_code: str, delta: int) -> int:
        """Apply a clamped reservation change; returns the delta actually applied."""
        record = self._ledger.get(sku, warehouse_code)
        if record is None:
            return 0
        updated = record.with_reserved(record.reserved + delta)
        if updated.reserved == record.reserved:
            return 0
        self._ledger.upsert(updated)
        return updated.reserved - record.reserved
