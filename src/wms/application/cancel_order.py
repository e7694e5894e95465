"""Application service: Cancel Sales Order use case.

Releases the reservation still held by each line before marking the
order canceled. Only the *unshipped* remainder is released; shipped
quantity is treated as consumed.
"""

from __future__ import annotations

import structlog

from wms.domain.model.order import SalesOrder
from wms.domain.repository.order_repository import SalesOrderRepository
from wms.domain.service.business_calendar import BusinessCalendar
from wms.domain.service.keyed_locks import KeyedLocks
from wms.domain.service.reservation_allocator import ReservationAllocator

logger = structlog.get_logger(__name__)


def release_unshipped(allocator: ReservationAllocator, order: SalesOrder) -> int:
    """Give back the reservation of every line's unshipped quantity."""
    released = 0
    for line in order.lines:
        if line.remaining_quantity > 0:
            released += allocator.release(line.sku, line.remaining_quantity)
    return released


class CancelSalesOrderHandler:

    def __init__(
        self,
        order_repo: SalesOrderRepository,
        allocator: ReservationAllocator,
        calendar: BusinessCalendar,
        order_locks: KeyedLocks | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._allocator = allocator
        self._calendar = calendar
        self._order_locks = order_locks if order_locks is not None else KeyedLocks()

    def handle(self, order_id: str) -> SalesOrder | None:
        with self._order_locks.hold(order_id):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                return None
            if order.is_canceled:
                return order

            released = release_unshipped(self._allocator, order)
            order.cancel(self._calendar.now())
            self._order_repo.save(order)

        logger.info(
            "sales_order_canceled",
            order_id=order.id,
            order_number=order.order_number,
            released=released,
        )
        return order
