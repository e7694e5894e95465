"""Business-day resolution in a fixed-offset timezone.

Orders are dated in the business timezone (UTC+9 by default), not in
UTC and not in the server's local time. An instant just after 15:00 UTC
therefore already belongs to the next business day.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone

from wms.domain.model.value_objects import OrderDateContext

_BARE_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _system_clock() -> datetime:
    return datetime.now(timezone.utc)


class BusinessCalendar:

    def __init__(
        self,
        utc_offset_hours: int = 9,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._tz = timezone(timedelta(hours=utc_offset_hours))
        self._clock = clock or _system_clock

    @property
    def tz(self) -> timezone:
        return self._tz

    def now(self) -> datetime:
        """Current instant, timezone-aware."""
        current = self._clock()
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        return current

    def today(self) -> OrderDateContext:
        local = self.now().astimezone(self._tz)
        return OrderDateContext.of(local.year, local.month, local.day)

    def parse(self, value: str | date | datetime | None) -> OrderDateContext | None:
        """Business date for ``value``, or None when it cannot be read.

        Bare ``YYYY-MM-DD`` strings and ``date`` objects name the business
        date directly. Timestamps are shifted into the business timezone;
        naive ones are taken as business-local time.
        """
        if isinstance(value, datetime):
            return self._from_datetime(value)
        if isinstance(value, date):
            return OrderDateContext.of(value.year, value.month, value.day)
        if not isinstance(value, str):
            return None
        text = value.strip()
        if not text:
            return None
        if _BARE_DATE_PATTERN.match(text):
            try:
                parsed_date = date.fromisoformat(text)
            except ValueError:
                return None
            return OrderDateContext.of(parsed_date.year, parsed_date.month, parsed_date.day)
        instant = self.parse_instant(text)
        return self._from_datetime(instant) if instant is not None else None

    def resolve(self, value: str | date | datetime | None) -> OrderDateContext:
        """Like ``parse`` but falls back to the current business day."""
        return self.parse(value) or self.today()

    def parse_instant(self, value: str | datetime | None) -> datetime | None:
        """Parse an ISO-8601 timestamp into an aware datetime.

        A bare date is midnight UTC of that date.
        """
        if isinstance(value, datetime):
            return value if value.tzinfo else value.replace(tzinfo=self._tz)
        if not isinstance(value, str):
            return None
        text = value.strip()
        if not text:
            return None
        if text[-1] in "Zz":
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        if _BARE_DATE_PATTERN.match(text):
            return parsed.replace(tzinfo=timezone.utc)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=self._tz)

    def _from_datetime(self, value: datetime) -> OrderDateContext:
        if value.tzinfo is None:
            value = value.replace(tzinfo=self._tz)
        local = value.astimezone(self._tz)
        return OrderDateContext.of(local.year, local.month, local.day)
