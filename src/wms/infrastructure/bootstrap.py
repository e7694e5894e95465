"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
``build_context()`` creates one self-contained set of shared state
(ledger, sequencer, repositories); build one per process, or one per
test for isolation.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from wms.application.cancel_order import CancelSalesOrderHandler
from wms.application.create_order import CreateSalesOrderHandler
from wms.application.delete_order import DeleteSalesOrderHandler
from wms.application.list_orders import ListSalesOrdersHandler
from wms.application.next_order_number import PeekSalesOrderNumberHandler
from wms.application.order_drafts import (
    DeleteSalesOrderDraftHandler,
    GetSalesOrderDraftHandler,
    ListSalesOrderDraftsHandler,
    SaveSalesOrderDraftHandler,
)
from wms.application.record_shipment import RecordSalesShipmentHandler
from wms.application.set_inventory import SetInventoryHandler
from wms.application.show_inventory import ShowInventoryHandler
from wms.application.show_order import GetSalesOrderHandler
from wms.domain.service.business_calendar import BusinessCalendar
from wms.domain.service.inventory_ledger import InventoryLedger
from wms.domain.service.keyed_locks import KeyedLocks
from wms.domain.service.order_number_sequencer import OrderNumberSequencer
from wms.domain.service.reservation_allocator import ReservationAllocator
from wms.infrastructure.config import Settings, get_settings
from wms.infrastructure.persistence.in_memory_repositories import (
    InMemorySalesOrderDraftRepository,
    InMemorySalesOrderRepository,
)


@dataclass
class WarehouseContext:
    settings: Settings
    calendar: BusinessCalendar
    ledger: InventoryLedger
    allocator: ReservationAllocator
    order_repo: InMemorySalesOrderRepository
    draft_repo: InMemorySalesOrderDraftRepository
    sequencer: OrderNumberSequencer
    order_locks: KeyedLocks = field(default_factory=KeyedLocks)

    # --- Order use cases ------------------------------------------------------

    def create_sales_order(self) -> CreateSalesOrderHandler:
        return CreateSalesOrderHandler(
            self.order_repo,
            self.allocator,
            self.sequencer,
            self.calendar,
            default_tenant_id=self.settings.default_tenant_id,
        )

    def cancel_sales_order(self) -> CancelSalesOrderHandler:
        return CancelSalesOrderHandler(
            self.order_repo, self.allocator, self.calendar, self.order_locks
        )

    def delete_sales_order(self) -> DeleteSalesOrderHandler:
        return DeleteSalesOrderHandler(
            self.order_repo, self.allocator, self.sequencer, self.order_locks
        )

    def record_sales_shipment(self) -> RecordSalesShipmentHandler:
        return RecordSalesShipmentHandler(self.order_repo, self.calendar, self.order_locks)

    def get_sales_order(self) -> GetSalesOrderHandler:
        return GetSalesOrderHandler(self.order_repo, self.settings.default_tenant_id)

    def list_sales_orders(self) -> ListSalesOrdersHandler:
        return ListSalesOrdersHandler(
            self.order_repo, self.calendar, self.settings.max_list_range_days
        )

    def peek_sales_order_number(self) -> PeekSalesOrderNumberHandler:
        return PeekSalesOrderNumberHandler(
            self.sequencer, self.calendar, self.settings.default_tenant_id
        )

    # --- Draft use cases ------------------------------------------------------

    def save_sales_order_draft(self) -> SaveSalesOrderDraftHandler:
        return SaveSalesOrderDraftHandler(
            self.draft_repo,
            self.calendar,
            default_tenant_id=self.settings.default_tenant_id,
            default_shipping_mode=self.settings.default_shipping_mode,
        )

    def list_sales_order_drafts(self) -> ListSalesOrderDraftsHandler:
        return ListSalesOrderDraftsHandler(
            self.draft_repo, self.calendar, self.settings.max_list_range_days
        )

    def get_sales_order_draft(self) -> GetSalesOrderDraftHandler:
        return GetSalesOrderDraftHandler(self.draft_repo)

    def delete_sales_order_draft(self) -> DeleteSalesOrderDraftHandler:
        return DeleteSalesOrderDraftHandler(self.draft_repo)

    # --- Inventory use cases --------------------------------------------------

    def set_inventory(self) -> SetInventoryHandler:
        return SetInventoryHandler(self.allocator)

    def show_inventory(self) -> ShowInventoryHandler:
        return ShowInventoryHandler(self.ledger)


def build_context(
    settings: Settings | None = None,
    clock: Callable[[], datetime] | None = None,
) -> WarehouseContext:
    settings = settings or get_settings()
    calendar = BusinessCalendar(settings.business_utc_offset_hours, clock=clock)
    ledger = InventoryLedger()
    order_repo = InMemorySalesOrderRepository()
    return WarehouseContext(
        settings=settings,
        calendar=calendar,
        ledger=ledger,
        allocator=ReservationAllocator(ledger),
        order_repo=order_repo,
        draft_repo=InMemorySalesOrderDraftRepository(),
        sequencer=OrderNumberSequencer(
            order_repo,
            prefix=settings.order_number_prefix,
            sequence_width=settings.order_number_sequence_width,
            default_tenant_id=settings.default_tenant_id,
        ),
    )
