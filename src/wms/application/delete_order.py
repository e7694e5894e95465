"""Application service: Delete Sales Order use case.

Like cancel, but the record is removed and its order number becomes
available to the tenant again.
"""

from __future__ import annotations

import structlog

from wms.application.cancel_order import release_unshipped
from wms.domain.model.order import SalesOrder
from wms.domain.repository.order_repository import SalesOrderRepository
from wms.domain.service.keyed_locks import KeyedLocks
from wms.domain.service.order_number_sequencer import OrderNumberSequencer
from wms.domain.service.reservation_allocator import ReservationAllocator

logger = structlog.get_logger(__name__)


class DeleteSalesOrderHandler:

    def __init__(
        self,
        order_repo: SalesOrderRepository,
        allocator: ReservationAllocator,
        sequencer: OrderNumberSequencer,
        order_locks: KeyedLocks | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._allocator = allocator
        self._sequencer = sequencer
        self._order_locks = order_locks if order_locks is not None else KeyedLocks()

    def handle(self, order_id: str) -> SalesOrder | None:
        with self._order_locks.hold(order_id):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                return None

            # A canceled order already gave its reservations back.
            released = 0 if order.is_canceled else release_unshipped(self._allocator, order)
            self._order_repo.delete(order_id)
            self._sequencer.unmark(order.tenant_id, order.order_number)

        logger.info(
            "sales_order_deleted",
            order_id=order.id,
            order_number=order.order_number,
            released=released,
        )
        return order
