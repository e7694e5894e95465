"""Domain service: Order Number Sequencer.

Issues human-readable order numbers of the form ``SO-YYYYMMDD-NNN`` from
one monotonic counter per (tenant, business day), and tracks which
numbers each tenant currently has in use.

The counters are process-local. Before every peek or allocation the
cached counter is reconciled against the highest sequence found among
stored orders for the same tenant and date, so orders that reached the
repository by another path (restored, imported) are never re-numbered.
"""

from __future__ import annotations

import threading

from wms.domain.exceptions import DuplicateOrderNumberError
from wms.domain.model.value_objects import (
    DEFAULT_TENANT_ID,
    AllocatedOrderNumber,
    SalesOrderNumberContext,
    normalize_tenant_id,
)
from wms.domain.repository.order_repository import SalesOrderRepository
from wms.domain.service.keyed_locks import KeyedLocks

ORDER_NUMBER_PREFIX = "SO"
ORDER_NUMBER_SEQUENCE_WIDTH = 3


class OrderNumberSequencer:

    def __init__(
        self,
        order_repo: SalesOrderRepository,
        prefix: str = ORDER_NUMBER_PREFIX,
        sequence_width: int = ORDER_NUMBER_SEQUENCE_WIDTH,
        default_tenant_id: str = DEFAULT_TENANT_ID,
    ) -> None:
        self._order_repo = order_repo
        self._prefix = prefix
        self._sequence_width = sequence_width
        self._default_tenant_id = default_tenant_id
        self._counters: dict[tuple[str, str], int] = {}
        self._counter_locks = KeyedLocks()
        self._in_use: set[tuple[str, str]] = set()
        self._in_use_lock = threading.Lock()

    # --- Formatting -----------------------------------------------------------

    def format_number(self, date_key: str, sequence: int) -> str:
        return f"{self._prefix}-{date_key}-{sequence:0{self._sequence_width}d}"

    def parse_sequence(self, order_number: str, date_key: str) -> int | None:
        """Sequence encoded in ``order_number`` for ``date_key``, if any."""
        prefix = f"{self._prefix}-{date_key}-"
        if not order_number.startswith(prefix):
            return None
        suffix = order_number[len(prefix):]
        return int(suffix) if suffix.isascii() and suffix.isdigit() else None

    # --- Sequences ------------------------------------------------------------

    def peek(self, context: SalesOrderNumberContext) -> AllocatedOrderNumber:
        """What ``allocate`` would return right now, without consuming it."""
        with self._counter_locks.hold(self._counter_key(context)):
            sequence = self._next_free_sequence(context, self._reconcile(context))
            return self._result(context, sequence)

    def allocate(self, context: SalesOrderNumberContext) -> AllocatedOrderNumber:
        key = self._counter_key(context)
        with self._counter_locks.hold(key):
            sequence = self._next_free_sequence(context, self._reconcile(context))
            self._counters[key] = sequence
            return self._result(context, sequence)

    def allocate_and_claim(self, context: SalesOrderNumberContext) -> AllocatedOrderNumber:
        """Allocate the next free number and mark it used as one step.

        An explicit ``claim`` does not take the counter lock, so it can
        take a number between the free check and this claim. The next
        sequence is tried when that happens.
        """
        key = self._counter_key(context)
        with self._counter_locks.hold(key):
            base = self._reconcile(context)
            while True:
                sequence = self._next_free_sequence(context, base)
                try:
                    self.claim(context.tenant_id, self.format_number(context.date_key, sequence))
                except DuplicateOrderNumberError:
                    base = sequence
                    continue
                self._counters[key] = sequence
                return self._result(context, sequence)

    def rollback(self, context: SalesOrderNumberContext, sequence: int) -> bool:
        """Give back ``sequence`` if nothing was allocated after it."""
        key = self._counter_key(context)
        with self._counter_locks.hold(key):
            if self._counters.get(key) != sequence:
                return False
            self._counters[key] = sequence - 1
            return True

    # --- Order numbers in use -------------------------------------------------

    def is_used(self, tenant_id: str | None, order_number: str) -> bool:
        with self._in_use_lock:
            return self._number_key(tenant_id, order_number) in self._in_use

    def mark_used(self, tenant_id: str | None, order_number: str) -> None:
        with self._in_use_lock:
            self._in_use.add(self._number_key(tenant_id, order_number))

    def unmark(self, tenant_id: str | None, order_number: str) -> None:
        with self._in_use_lock:
            self._in_use.discard(self._number_key(tenant_id, order_number))

    def claim(self, tenant_id: str | None, order_number: str) -> None:
        """Mark ``order_number`` used, failing if the tenant already uses it."""
        key = self._number_key(tenant_id, order_number)
        with self._in_use_lock:
            if key in self._in_use:
                raise DuplicateOrderNumberError(key[0], order_number)
            self._in_use.add(key)

    # --- Internal helpers -----------------------------------------------------

    def _reconcile(self, context: SalesOrderNumberContext) -> int:
        key = self._counter_key(context)
        cached = self._counters.get(key, 0)
        highest = max(cached, self._highest_stored_sequence(context))
        if highest != cached:
            self._counters[key] = highest
        return highest

    def _highest_stored_sequence(self, context: SalesOrderNumberContext) -> int:
        highest = 0
        for order in self._order_repo.list_all():
            if normalize_tenant_id(order.tenant_id, self._default_tenant_id) != context.tenant_id:
                continue
            if order.order_date != context.order_date:
                continue
            candidate = order.order_sequence
            if candidate is None:
                candidate = self.parse_sequence(order.order_number, context.date_key)
            if candidate is not None and candidate > highest:
                highest = candidate
        return highest

    def _next_free_sequence(self, context: SalesOrderNumberContext, base: int) -> int:
        sequence = base + 1
        while self.is_used(context.tenant_id, self.format_number(context.date_key, sequence)):
            sequence += 1
        return sequence

    def _result(self, context: SalesOrderNumberContext, sequence: int) -> AllocatedOrderNumber:
        return AllocatedOrderNumber(
            tenant_id=context.tenant_id,
            date_key=context.date_key,
            order_date=context.order_date,
            sequence=sequence,
            order_number=self.format_number(context.date_key, sequence),
        )

    def _counter_key(self, context: SalesOrderNumberContext) -> tuple[str, str]:
        return (context.tenant_id, context.date_key)

    def _number_key(self, tenant_id: str | None, order_number: str) -> tuple[str, str]:
        return (normalize_tenant_id(tenant_id, self._default_tenant_id), order_number)
