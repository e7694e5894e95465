"""Unit tests for the SalesOrder aggregate and status derivation."""

from datetime import datetime, timezone

import pytest

from wms.domain.exceptions import ValidationError
from wms.domain.model.order import (
    SalesOrder,
    SalesOrderLine,
    SalesOrderLineStatus,
    SalesOrderStatus,
    derive_line_status,
    derive_order_status,
)

TS = datetime(2024, 5, 15, 3, 0, tzinfo=timezone.utc)


def _make_order(*quantities: int) -> SalesOrder:
    lines = [
        SalesOrderLine(id=f"L{i}", so_id="SO-1", sku=f"SKU{i}", ordered_qty=qty)
        for i, qty in enumerate(quantities, start=1)
    ]
    return SalesOrder(
        id="SO-1",
        tenant_id="t1",
        customer_id="c1",
        customer_name="c1",
        order_number="SO-20240515-001",
        order_date="2024-05-15",
        order_sequence=1,
        lines=lines,
    )


class TestLineStatus:

    @pytest.mark.parametrize(
        "ordered, shipped, expected",
        [
            (5, 0, SalesOrderLineStatus.OPEN),
            (5, 2, SalesOrderLineStatus.PARTIAL),
            (5, 5, SalesOrderLineStatus.CLOSED),
            (5, 7, SalesOrderLineStatus.CLOSED),
        ],
    )
    def test_derivation(self, ordered, shipped, expected):
        assert derive_line_status(ordered, shipped) == expected


class TestOrderStatus:

    def test_all_closed_is_closed(self):
        statuses = [SalesOrderLineStatus.CLOSED, SalesOrderLineStatus.CLOSED]
        assert derive_order_status(statuses) == SalesOrderStatus.CLOSED

    def test_any_partial_is_packed(self):
        statuses = [SalesOrderLineStatus.OPEN, SalesOrderLineStatus.PARTIAL]
        assert derive_order_status(statuses) == SalesOrderStatus.PACKED

    def test_open_and_closed_mix_stays_open(self):
        statuses = [SalesOrderLineStatus.OPEN, SalesOrderLineStatus.CLOSED]
        assert derive_order_status(statuses) == SalesOrderStatus.OPEN

    def test_new_order_is_open(self):
        assert _make_order(3, 4).status == SalesOrderStatus.OPEN


class TestRecordShipment:

    def test_partial_then_full(self):
        order = _make_order(5)
        previous = order.record_shipment("L1", 2, TS)
        assert previous == 0
        assert order.status == SalesOrderStatus.PACKED

        previous = order.record_shipment("L1", 3, TS)
        assert previous == 2
        assert order.lines[0].status == SalesOrderLineStatus.CLOSED
        assert order.status == SalesOrderStatus.CLOSED

    def test_capped_at_ordered(self):
        order = _make_order(5)
        order.record_shipment("L1", 9, TS)
        assert order.lines[0].shipped_qty == 5

    def test_remaining_by_sku(self):
        order = _make_order(5, 2)
        order.record_shipment("L1", 4, TS)
        assert order.remaining_by_sku == {"SKU1": 1, "SKU2": 2}

    def test_unknown_line_rejected(self):
        with pytest.raises(ValidationError, match="not found"):
            _make_order(5).record_shipment("nope", 1, TS)

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _make_order(5).record_shipment("L1", 0, TS)

    def test_canceled_order_rejected(self):
        order = _make_order(5)
        order.cancel(TS)
        with pytest.raises(ValidationError, match="canceled"):
            order.record_shipment("L1", 1, TS)


class TestCancel:

    def test_cancel_overrides_derived_status(self):
        order = _make_order(5)
        order.record_shipment("L1", 5, TS)
        order.cancel(TS)
        assert order.status == SalesOrderStatus.CANCELED
        assert order.canceled_at == TS

    def test_double_cancel_rejected(self):
        order = _make_order(5)
        order.cancel(TS)
        with pytest.raises(ValidationError, match="already canceled"):
            order.cancel(TS)
