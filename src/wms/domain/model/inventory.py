"""Inventory records and the aggregate totals kept over them.

One InventoryRecord exists per (SKU, warehouse) pair. The ledger owns
them; everything handed out is a frozen copy.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from wms.domain.exceptions import ValidationError
from wms.domain.model.value_objects import normalize_sku


@dataclass(frozen=True)
class InventoryRecord:
    """Stock of one SKU at one warehouse.

    Invariants:
    - ``0 <= reserved <= on_hand``
    - ``(sku, warehouse_code)`` is the identity
    """

    sku: str
    warehouse_code: str
    on_hand: int
    reserved: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.sku, str) or not self.sku.strip():
            raise ValidationError("Inventory record requires a SKU")
        if not isinstance(self.warehouse_code, str) or not self.warehouse_code.strip():
            raise ValidationError(f"Inventory record for {self.sku} requires a warehouse")
        # Normalized keys: the order path upper-cases SKUs too.
        object.__setattr__(self, "sku", normalize_sku(self.sku))
        object.__setattr__(self, "warehouse_code", self.warehouse_code.strip())
        if self.on_hand < 0:
            raise ValidationError(
                f"On-hand for {self.sku}@{self.warehouse_code} cannot be negative"
            )
        if not 0 <= self.reserved <= self.on_hand:
            raise ValidationError(
                f"Reserved for {self.sku}@{self.warehouse_code} must be between "
                f"0 and {self.on_hand}, got {self.reserved}"
            )

    @property
    def key(self) -> tuple[str, str]:
        return (self.sku, self.warehouse_code)

    @property
    def available(self) -> int:
        return max(0, self.on_hand - self.reserved)

    def with_reserved(self, reserved: int) -> InventoryRecord:
        """Copy with ``reserved`` clamped into ``[0, on_hand]``."""
        return replace(self, reserved=max(0, min(self.on_hand, reserved)))


@dataclass(frozen=True)
class InventoryTotals:
    on_hand: int = 0
    reserved: int = 0

    @property
    def available(self) -> int:
        return max(0, self.on_hand - self.reserved)

    @property
    def is_empty(self) -> bool:
        return self.on_hand == 0 and self.reserved == 0

    def plus(self, delta_on_hand: int, delta_reserved: int) -> InventoryTotals:
        return InventoryTotals(self.on_hand + delta_on_hand, self.reserved + delta_reserved)


@dataclass(frozen=True)
class InventorySummary:
    sku: str
    total_on_hand: int
    total_reserved: int
    items: list[InventoryRecord] = field(default_factory=list)

    @property
    def total_available(self) -> int:
        return max(0, self.total_on_hand - self.total_reserved)
