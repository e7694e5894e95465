"""Application service: Peek Next Sales Order Number use case (query)."""

from __future__ import annotations

from wms.application.dto import DateInput
from wms.domain.exceptions import ValidationError
from wms.domain.model.value_objects import (
    DEFAULT_TENANT_ID,
    AllocatedOrderNumber,
    SalesOrderNumberContext,
)
from wms.domain.service.business_calendar import BusinessCalendar
from wms.domain.service.order_number_sequencer import OrderNumberSequencer


class PeekSalesOrderNumberHandler:

    def __init__(
        self,
        sequencer: OrderNumberSequencer,
        calendar: BusinessCalendar,
        default_tenant_id: str = DEFAULT_TENANT_ID,
    ) -> None:
        self._sequencer = sequencer
        self._calendar = calendar
        self._default_tenant_id = default_tenant_id

    def handle(
        self, tenant_id: str | None = None, order_date: DateInput | None = None
    ) -> AllocatedOrderNumber:
        """Preview the number the next order would get; nothing is allocated.

        Without an order date the current business day is used; a date
        that is given but unreadable is rejected rather than defaulted.
        """
        given = not (
            order_date is None or (isinstance(order_date, str) and not order_date.strip())
        )
        date_context = self._calendar.parse(order_date) if given else self._calendar.today()
        if date_context is None:
            raise ValidationError(f"Invalid order date: {order_date!r}")

        context = SalesOrderNumberContext.build(date_context, tenant_id, self._default_tenant_id)
        return self._sequencer.peek(context)
