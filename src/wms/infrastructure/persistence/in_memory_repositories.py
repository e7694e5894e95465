"""Process-memory implementations of the repositories.

State is lost when the process exits. Stored objects are copied on the
way in and on the way out, so callers can never mutate stored state by
holding on to a returned order or draft.
"""

from __future__ import annotations

import copy
import threading

from wms.domain.model.draft import SalesOrderDraft
from wms.domain.model.order import SalesOrder
from wms.domain.repository.draft_repository import SalesOrderDraftRepository
from wms.domain.repository.order_repository import SalesOrderRepository


class InMemorySalesOrderRepository(SalesOrderRepository):

    def __init__(self, orders: list[SalesOrder] | None = None) -> None:
        self._lock = threading.Lock()
        self._store: dict[str, SalesOrder] = {}
        for order in orders or []:
            self._store[order.id] = copy.deepcopy(order)

    # --- SalesOrderRepository interface ---------------------------------------

    def get_by_id(self, order_id: str) -> SalesOrder | None:
        with self._lock:
            order = self._store.get(order_id)
            return copy.deepcopy(order) if order is not None else None

    def list_all(self) -> list[SalesOrder]:
        with self._lock:
            return [copy.deepcopy(order) for order in self._store.values()]

    def save(self, order: SalesOrder) -> None:
        with self._lock:
            self._store[order.id] = copy.deepcopy(order)

    def delete(self, order_id: str) -> SalesOrder | None:
        with self._lock:
            return self._store.pop(order_id, None)


class InMemorySalesOrderDraftRepository(SalesOrderDraftRepository):

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._store: dict[str, SalesOrderDraft] = {}

    # --- SalesOrderDraftRepository interface ----------------------------------

    def get_by_id(self, draft_id: str) -> SalesOrderDraft | None:
        with self._lock:
            draft = self._store.get(draft_id)
            return copy.deepcopy(draft) if draft is not None else None

    def list_all(self) -> list[SalesOrderDraft]:
        with self._lock:
            return [copy.deepcopy(draft) for draft in self._store.values()]

    def save(self, draft: SalesOrderDraft) -> None:
        with self._lock:
            self._store[draft.id] = copy.deepcopy(draft)

    def delete(self, draft_id: str) -> SalesOrderDraft | None:
        with self._lock:
            return self._store.pop(draft_id, None)
