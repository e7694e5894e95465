"""Application service: List Sales Orders use case (query).

Orders are filtered by tenant and by an inclusive range over their
order date, where an order date counts as midnight UTC of that day.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from wms.application.dto import DateInput, SalesOrderListFilters
from wms.domain.exceptions import ValidationError
from wms.domain.model.order import SalesOrder
from wms.domain.model.value_objects import clean_text
from wms.domain.repository.order_repository import SalesOrderRepository
from wms.domain.service.business_calendar import BusinessCalendar

MAX_RANGE_DAYS = 365


class DateRange:
    """Validated ``[start, end]`` window; either bound may be open."""

    def __init__(
        self,
        calendar: BusinessCalendar,
        from_: DateInput | None,
        to: DateInput | None,
        max_days: int = MAX_RANGE_DAYS,
    ) -> None:
        self.start = self._parse_bound(calendar, from_, "start")
        self.end = self._parse_bound(calendar, to, "end")
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValidationError("Range start must not be after its end")
        if self.start is not None:
            effective_end = self.end or calendar.now()
            if effective_end - self.start > timedelta(days=max_days):
                raise ValidationError(f"Range cannot exceed {max_days} days")

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, moment: datetime | None) -> bool:
        if self.is_open:
            return True
        if moment is None:
            return False
        if self.start is not None and moment < self.start:
            return False
        if self.end is not None and moment > self.end:
            return False
        return True

    @staticmethod
    def _parse_bound(
        calendar: BusinessCalendar, value: DateInput | None, name: str
    ) -> datetime | None:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        if isinstance(value, datetime):
            return calendar.parse_instant(value)
        parsed = calendar.parse_instant(value if isinstance(value, str) else value.isoformat())
        if parsed is None:
            raise ValidationError(f"Invalid range {name}: {value!r}")
        return parsed


def order_date_instant(order_date: str | None) -> datetime | None:
    if not order_date:
        return None
    try:
        return datetime.fromisoformat(order_date).replace(tzinfo=timezone.utc)
    except ValueError:
        return None


class ListSalesOrdersHandler:

    def __init__(
        self,
        order_repo: SalesOrderRepository,
        calendar: BusinessCalendar,
        max_range_days: int = MAX_RANGE_DAYS,
    ) -> None:
        self._order_repo = order_repo
        self._calendar = calendar
        self._max_range_days = max_range_days

    def handle(self, filters: SalesOrderListFilters | None = None) -> list[SalesOrder]:
        filters = filters or SalesOrderListFilters()
        window = DateRange(self._calendar, filters.from_, filters.to, self._max_range_days)
        tenant_id = clean_text(filters.tenant_id)

        return [
            order
            for order in self._order_repo.list_all()
            if (tenant_id is None or order.tenant_id == tenant_id)
            and window.contains(order_date_instant(order.order_date))
        ]
