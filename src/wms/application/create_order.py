"""Application service: Create Sales Order use case.

This is the one transaction in the system that coordinates the ledger,
the allocator and the sequencer:

1. Normalize lines and total the requested quantity per SKU.
2. Check every SKU's availability before reserving anything.
3. Claim the caller's order number, or allocate the next one.
4. Reserve line by line. On any failure, undo every reservation made
   in this call plus the order-number claim, then re-raise.
5. Store the order.

Steps 2–5 run while holding the locks of every SKU on the order.
"""

from __future__ import annotations

import uuid
from datetime import datetime

import structlog

from wms.application.dto import CreateSalesOrderInput, SalesOrderLineInput
from wms.domain.exceptions import InsufficientStockError, ValidationError
from wms.domain.model.order import SalesOrder, SalesOrderLine
from wms.domain.model.value_objects import (
    DEFAULT_TENANT_ID,
    AllocatedOrderNumber,
    SalesOrderNumberContext,
    clean_text,
    normalize_quantity,
    normalize_sku,
    to_decimal,
)
from wms.domain.repository.order_repository import SalesOrderRepository
from wms.domain.service.business_calendar import BusinessCalendar
from wms.domain.service.order_number_sequencer import OrderNumberSequencer
from wms.domain.service.reservation_allocator import Reservation, ReservationAllocator

logger = structlog.get_logger(__name__)


class CreateSalesOrderHandler:

    def __init__(
        self,
        order_repo: SalesOrderRepository,
        allocator: ReservationAllocator,
        sequencer: OrderNumberSequencer,
        calendar: BusinessCalendar,
        default_tenant_id: str = DEFAULT_TENANT_ID,
    ) -> None:
        self._order_repo = order_repo
        self._allocator = allocator
        self._sequencer = sequencer
        self._calendar = calendar
        self._default_tenant_id = default_tenant_id

    def handle(self, data: CreateSalesOrderInput) -> SalesOrder:
        customer_id = clean_text(data.customer_id)
        if customer_id is None:
            raise ValidationError("customerId is required")
        if not data.lines:
            raise ValidationError("Sales order must contain at least one line")

        now = self._calendar.now()
        order_id = f"SO-{uuid.uuid4().hex[:8]}"
        lines = self._build_lines(order_id, data.lines, now)
        if not lines:
            raise ValidationError("Sales order must contain a line with a positive quantity")

        requested: dict[str, int] = {}
        for line in lines:
            requested[line.sku] = requested.get(line.sku, 0) + line.ordered_qty

        context = SalesOrderNumberContext.build(
            self._calendar.resolve(data.order_date), data.tenant_id, self._default_tenant_id
        )
        explicit_number = clean_text(data.order_number)

        with self._allocator.hold(*requested):
            # Phase 1: fail fast, before any side effect
            for sku, qty in requested.items():
                available = self._allocator.available(sku)
                if qty > available:
                    logger.warning(
                        "sales_order_rejected", sku=sku, requested=qty, available=available
                    )
                    raise InsufficientStockError(sku, qty, available)

            # Phase 2: order number
            allocated: AllocatedOrderNumber | None = None
            if explicit_number is not None:
                self._sequencer.claim(context.tenant_id, explicit_number)
                order_number = explicit_number
                sequence = self._sequencer.parse_sequence(explicit_number, context.date_key)
            else:
                allocated = self._sequencer.allocate_and_claim(context)
                order_number = allocated.order_number
                sequence = allocated.sequence

            # Phase 3: reserve, compensating on any failure
            reservations: list[Reservation] = []
            try:
                for line in lines:
                    reservations.extend(self._allocator.reserve(line.sku, line.ordered_qty))

                order = SalesOrder(
                    id=order_id,
                    tenant_id=context.tenant_id,
                    customer_id=customer_id,
                    customer_name=clean_text(data.customer_name) or customer_id,
                    order_number=order_number,
                    order_date=context.order_date,
                    order_sequence=sequence,
                    lines=lines,
                    memo=clean_text(data.memo),
                    promised_date=data.promised_date or None,
                    created_at=now,
                    confirmed_at=now,
                    updated_at=now,
                )
                self._order_repo.save(order)
            except Exception:
                self._undo(reservations, context, order_number, allocated)
                raise

        logger.info(
            "sales_order_created",
            order_id=order.id,
            order_number=order.order_number,
            tenant_id=order.tenant_id,
            lines=len(order.lines),
        )
        return order

    # --- Compensation ---------------------------------------------------------

    def _undo(
        self,
        reservations: list[Reservation],
        context: SalesOrderNumberContext,
        order_number: str,
        allocated: AllocatedOrderNumber | None,
    ) -> None:
        for reservation in reversed(reservations):
            self._allocator.release(
                reservation.sku,
                reservation.quantity,
                preferred_warehouse=reservation.warehouse_code,
            )
        self._sequencer.unmark(context.tenant_id, order_number)
        if allocated is not None:
            self._sequencer.rollback(context, allocated.sequence)
        logger.warning(
            "sales_order_rolled_back",
            order_number=order_number,
            tenant_id=context.tenant_id,
            released=sum(r.quantity for r in reservations),
        )

    # --- Mapping --------------------------------------------------------------

    def _build_lines(
        self, order_id: str, inputs: list[SalesOrderLineInput], now: datetime
    ) -> list[SalesOrderLine]:
        lines: list[SalesOrderLine] = []
        for item in inputs:
            sku = normalize_sku(item.sku) if isinstance(item.sku, str) else ""
            if not sku:
                raise ValidationError("Every sales order line requires a SKU")
            qty = normalize_quantity(item.ordered_qty)
            if qty <= 0:
                continue
            lines.append(
                SalesOrderLine(
                    id=str(uuid.uuid4()),
                    so_id=order_id,
                    sku=sku,
                    ordered_qty=qty,
                    product_name=clean_text(item.product_name),
                    unit=clean_text(item.unit),
                    unit_price=to_decimal(item.unit_price),
                    amount=to_decimal(item.amount),
                    tax_amount=to_decimal(item.tax_amount),
                    tax_label=clean_text(item.tax_label),
                    currency=clean_text(item.currency),
                    tax_type_id=clean_text(item.tax_type_id),
                    created_at=now,
                    updated_at=now,
                )
            )
        return lines
