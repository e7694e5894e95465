"""Domain service: Inventory Ledger.

Owns every (SKU, warehouse) InventoryRecord plus three tiers of running
totals: per SKU, per warehouse and overall. Totals are maintained by
applying the delta of each mutation, never by re-summing, and a totals
entry that returns to zero is dropped.

The ledger does not clamp. Callers that adjust reservations (the
ReservationAllocator) build already-clamped records; a record that
breaks ``0 <= reserved <= on_hand`` cannot be constructed at all.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable

from wms.domain.exceptions import ValidationError
from wms.domain.model.inventory import InventoryRecord, InventorySummary, InventoryTotals
from wms.domain.model.value_objects import normalize_sku

RecordKey = tuple[str, str]


class InventoryLedger:

    def __init__(self, records: Iterable[InventoryRecord] | None = None) -> None:
        self._lock = threading.RLock()
        self._records: dict[RecordKey, InventoryRecord] = {}
        self._sku_index: dict[str, set[RecordKey]] = {}
        self._warehouse_index: dict[str, set[RecordKey]] = {}
        self._totals_by_sku: dict[str, InventoryTotals] = {}
        self._totals_by_warehouse: dict[str, InventoryTotals] = {}
        self._overall = InventoryTotals()
        if records:
            self.seed(records)

    # --- Mutations ------------------------------------------------------------

    def upsert(self, record: InventoryRecord) -> None:
        """Insert or replace the record for ``(sku, warehouse_code)``."""
        with self._lock:
            key = record.key
            previous = self._records.get(key)
            self._records[key] = record
            self._sku_index.setdefault(record.sku, set()).add(key)
            self._warehouse_index.setdefault(record.warehouse_code, set()).add(key)

            delta_on_hand = record.on_hand - (previous.on_hand if previous else 0)
            delta_reserved = record.reserved - (previous.reserved if previous else 0)
            if delta_on_hand or delta_reserved:
                self._apply_delta(record.sku, record.warehouse_code, delta_on_hand, delta_reserved)

    def remove(self, sku: str, warehouse_code: str) -> InventoryRecord | None:
        with self._lock:
            return self._remove_key((normalize_sku(sku), warehouse_code.strip()))

    def replace_for_sku(self, sku: str, records: Iterable[InventoryRecord]) -> None:
        """Make ``records`` the complete set of records for ``sku``.

        Keys present in ``records`` are upserted, keys that disappear are
        removed. Records of other SKUs are untouched. Every record is
        checked before anything is written.
        """
        target = normalize_sku(sku)
        incoming = list(records)
        for record in incoming:
            if record.sku != target:
                raise ValidationError(
                    f"Record for {record.sku} cannot be written as part of {target}"
                )

        with self._lock:
            stale = set(self._sku_index.get(target, ()))
            for record in incoming:
                self.upsert(record)
                stale.discard(record.key)
            for key in stale:
                self._remove_key(key)

    def delete_for_sku(self, sku: str) -> None:
        with self._lock:
            for key in list(self._sku_index.get(normalize_sku(sku), ())):
                self._remove_key(key)

    def delete_for_warehouse(self, warehouse_code: str) -> None:
        with self._lock:
            for key in list(self._warehouse_index.get(warehouse_code.strip(), ())):
                self._remove_key(key)

    def seed(self, records: Iterable[InventoryRecord]) -> None:
        with self._lock:
            for record in records:
                self.upsert(record)

    # --- Queries --------------------------------------------------------------

    def get(self, sku: str, warehouse_code: str) -> InventoryRecord | None:
        with self._lock:
            return self._records.get((normalize_sku(sku), warehouse_code.strip()))

    def list_for_sku(self, sku: str) -> list[InventoryRecord]:
        with self._lock:
            keys = self._sku_index.get(normalize_sku(sku), ())
            return [self._records[key] for key in keys]

    def list_all(self) -> list[InventoryRecord]:
        with self._lock:
            return list(self._records.values())

    def skus(self) -> list[str]:
        with self._lock:
            return sorted(self._sku_index)

    def totals_for_sku(self, sku: str) -> InventoryTotals:
        with self._lock:
            return self._totals_by_sku.get(normalize_sku(sku), InventoryTotals())

    def summarize(self, sku: str) -> InventorySummary:
        with self._lock:
            target = normalize_sku(sku)
            totals = self.totals_for_sku(target)
            items = sorted(self.list_for_sku(target), key=lambda r: r.warehouse_code)
            return InventorySummary(
                sku=target,
                total_on_hand=totals.on_hand,
                total_reserved=totals.reserved,
                items=items,
            )

    def totals(self) -> InventoryTotals:
        with self._lock:
            return self._overall

    def totals_by_warehouse(self) -> dict[str, InventoryTotals]:
        with self._lock:
            return dict(self._totals_by_warehouse)

    # --- Internal helpers -----------------------------------------------------

    def _remove_key(self, key: RecordKey) -> InventoryRecord | None:
        existing = self._records.pop(key, None)
        if existing is None:
            return None
        self._discard_index(self._sku_index, existing.sku, key)
        self._discard_index(self._warehouse_index, existing.warehouse_code, key)
        self._apply_delta(
            existing.sku, existing.warehouse_code, -existing.on_hand, -existing.reserved
        )
        return existing

    def _apply_delta(
        self, sku: str, warehouse_code: str, delta_on_hand: int, delta_reserved: int
    ) -> None:
        self._apply_tier(self._totals_by_sku, sku, delta_on_hand, delta_reserved)
        self._apply_tier(self._totals_by_warehouse, warehouse_code, delta_on_hand, delta_reserved)
        self._overall = self._overall.plus(delta_on_hand, delta_reserved)

    @staticmethod
    def _apply_tier(
        tier: dict[str, InventoryTotals], key: str, delta_on_hand: int, delta_reserved: int
    ) -> None:
        updated = tier.get(key, InventoryTotals()).plus(delta_on_hand, delta_reserved)
        if updated.is_empty:
            tier.pop(key, None)
        else:
            tier[key] = updated

    @staticmethod
    def _discard_index(index: dict[str, set[RecordKey]], name: str, key: RecordKey) -> None:
        bucket = index.get(name)
        if bucket is None:
            return
        bucket.discard(key)
        if not bucket:
            del index[name]
