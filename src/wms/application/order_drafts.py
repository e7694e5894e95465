"""Application services: Sales Order Draft use cases.

Drafts are plain saved forms. Saving, listing or deleting one never
touches inventory or the order-number sequence.
"""

from __future__ import annotations

import uuid

import structlog

from wms.application.dto import SalesOrderDraftInput, SalesOrderDraftListFilters
from wms.application.list_orders import MAX_RANGE_DAYS, DateRange
from wms.domain.exceptions import EntityNotFoundError, ValidationError
from wms.domain.model.draft import SalesOrderDraft, SalesOrderDraftLine
from wms.domain.model.value_objects import (
    DEFAULT_TENANT_ID,
    clean_text,
    normalize_quantity,
    normalize_tenant_id,
    to_decimal,
)
from wms.domain.repository.draft_repository import SalesOrderDraftRepository
from wms.domain.service.business_calendar import BusinessCalendar

logger = structlog.get_logger(__name__)

DEFAULT_SHIPPING_MODE = "immediate"


class SaveSalesOrderDraftHandler:

    def __init__(
        self,
        draft_repo: SalesOrderDraftRepository,
        calendar: BusinessCalendar,
        default_tenant_id: str = DEFAULT_TENANT_ID,
        default_shipping_mode: str = DEFAULT_SHIPPING_MODE,
    ) -> None:
        self._draft_repo = draft_repo
        self._calendar = calendar
        self._default_tenant_id = default_tenant_id
        self._default_shipping_mode = default_shipping_mode

    def handle(self, data: SalesOrderDraftInput) -> SalesOrderDraft:
        """Create a draft, or overwrite the one named by ``data.id``.

        Fields left empty on an update keep the stored draft's value for
        tenant, shipping mode, shipping note and warehouse.
        """
        customer_id = clean_text(data.customer_id)
        if customer_id is None:
            raise ValidationError("customerId is required")
        if not data.lines:
            raise ValidationError("lines are required")

        draft_id = clean_text(data.id)
        existing = None
        if draft_id is not None:
            existing = self._draft_repo.get_by_id(draft_id)
            if existing is None:
                raise EntityNotFoundError(f"Draft {draft_id} not found")

        now = self._calendar.now()
        draft = SalesOrderDraft(
            id=draft_id or f"SOD-{uuid.uuid4().hex[:8]}",
            tenant_id=normalize_tenant_id(
                data.tenant_id or (existing.tenant_id if existing else None),
                self._default_tenant_id,
            ),
            customer_id=customer_id,
            customer_name=clean_text(data.customer_name),
            order_number=clean_text(data.order_number),
            order_date=clean_text(data.order_date),
            memo=clean_text(data.memo),
            promised_date=data.promised_date or None,
            shipping_mode=(
                clean_text(data.shipping_mode)
                or (existing.shipping_mode if existing else None)
                or self._default_shipping_mode
            ),
            shipping_note=(
                clean_text(data.shipping_note)
                if data.shipping_note is not None
                else (existing.shipping_note if existing else None)
            ),
            warehouse=(
                data.warehouse.strip()
                if data.warehouse is not None
                else (existing.warehouse if existing else "")
            ),
            lines=[
                SalesOrderDraftLine(
                    sku=line.sku.strip(),
                    ordered_qty=normalize_quantity(line.ordered_qty),
                    product_name=clean_text(line.product_name),
                    unit=clean_text(line.unit),
                    unit_price=to_decimal(line.unit_price),
                    amount=to_decimal(line.amount),
                    tax_amount=to_decimal(line.tax_amount),
                    tax_label=clean_text(line.tax_label),
                    currency=clean_text(line.currency),
                    tax_type_id=clean_text(line.tax_type_id),
                )
                for line in data.lines
            ],
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        self._draft_repo.save(draft)
        logger.info("sales_order_draft_saved", draft_id=draft.id, tenant_id=draft.tenant_id)
        return draft


class ListSalesOrderDraftsHandler:

    def __init__(
        self,
        draft_repo: SalesOrderDraftRepository,
        calendar: BusinessCalendar,
        max_range_days: int = MAX_RANGE_DAYS,
    ) -> None:
        self._draft_repo = draft_repo
        self._calendar = calendar
        self._max_range_days = max_range_days

    def handle(
        self, filters: SalesOrderDraftListFilters | None = None
    ) -> list[SalesOrderDraft]:
        """Matching drafts, most recently updated first.

        A draft is dated by its order date when it has one, else by when
        it was created.
        """
        filters = filters or SalesOrderDraftListFilters()
        window = DateRange(self._calendar, filters.from_, filters.to, self._max_range_days)
        tenant_id = clean_text(filters.tenant_id)

        drafts = [
            draft
            for draft in self._draft_repo.list_all()
            if (tenant_id is None or draft.tenant_id == tenant_id)
            and window.contains(self._calendar.parse_instant(draft.order_date or draft.created_at))
        ]
        drafts.sort(key=lambda d: d.updated_at, reverse=True)
        return drafts


class GetSalesOrderDraftHandler:

    def __init__(self, draft_repo: SalesOrderDraftRepository) -> None:
        self._draft_repo = draft_repo

    def handle(self, draft_id: str) -> SalesOrderDraft:
        draft = self._draft_repo.get_by_id(draft_id)
        if draft is None:
            raise EntityNotFoundError(f"Draft {draft_id} not found")
        return draft


class DeleteSalesOrderDraftHandler:

    def __init__(self, draft_repo: SalesOrderDraftRepository) -> None:
        self._draft_repo = draft_repo

    def handle(self, draft_id: str) -> SalesOrderDraft | None:
        return self._draft_repo.delete(draft_id)
