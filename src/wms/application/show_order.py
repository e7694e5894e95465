"""Application service: Show Sales Order use case (query)."""

from __future__ import annotations

from wms.domain.exceptions import EntityNotFoundError
from wms.domain.model.order import SalesOrder
from wms.domain.model.value_objects import DEFAULT_TENANT_ID, normalize_tenant_id
from wms.domain.repository.order_repository import SalesOrderRepository


class GetSalesOrderHandler:

    def __init__(
        self,
        order_repo: SalesOrderRepository,
        default_tenant_id: str = DEFAULT_TENANT_ID,
    ) -> None:
        self._order_repo = order_repo
        self._default_tenant_id = default_tenant_id

    def handle(self, order_id: str, tenant_id: str | None = None) -> SalesOrder:
        """Fetch an order; one owned by another tenant counts as not found."""
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Sales order {order_id} not found")
        if tenant_id is not None and order.tenant_id != normalize_tenant_id(
            tenant_id, self._default_tenant_id
        ):
            raise EntityNotFoundError(f"Sales order {order_id} not found")
        return order
