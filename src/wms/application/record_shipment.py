"""Application service: Record Sales Shipment use case.

Advances a line's shipped quantity; line and order statuses follow from
the quantities. The ledger is deliberately left alone: shipping neither
releases the line's reservation nor lowers on-hand here.
"""

from __future__ import annotations

from datetime import datetime

from wms.application.dto import SalesShipmentResult
from wms.domain.model.value_objects import normalize_quantity
from wms.domain.repository.order_repository import SalesOrderRepository
from wms.domain.service.business_calendar import BusinessCalendar
from wms.domain.service.keyed_locks import KeyedLocks


class RecordSalesShipmentHandler:

    def __init__(
        self,
        order_repo: SalesOrderRepository,
        calendar: BusinessCalendar,
        order_locks: KeyedLocks | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._calendar = calendar
        self._order_locks = order_locks if order_locks is not None else KeyedLocks()

    def handle(
        self,
        so_id: str,
        line_id: str,
        quantity: int | float,
        shipped_at: str | datetime | None = None,
    ) -> SalesShipmentResult | None:
        """Returns None for an unknown order or line, or a quantity that rounds to 0."""
        with self._order_locks.hold(so_id):
            order = self._order_repo.get_by_id(so_id)
            if order is None:
                return None
            line = order.find_line(line_id)
            if line is None:
                return None
            qty = min(line.ordered_qty, normalize_quantity(quantity))
            if qty <= 0:
                return None

            timestamp = self._calendar.parse_instant(shipped_at) or self._calendar.now()
            previous = order.record_shipment(line_id, qty, timestamp)
            self._order_repo.save(order)

        return SalesShipmentResult(order=order, previous_shipped_qty=previous, line=line)
