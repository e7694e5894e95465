"""Integration tests for the SetInventory and ShowInventory use cases."""

import pytest

from wms.application.dto import (
    CreateSalesOrderInput,
    InventoryInput,
    InventoryLineDTO,
    SalesOrderLineInput,
)
from wms.domain.exceptions import InsufficientStockError, ValidationError
from wms.domain.model.inventory import InventoryTotals
from tests.fakes import make_context, record


class TestSetInventory:

    def test_replaces_warehouse_list(self):
        context = make_context([record("A", "WH1", 10), record("A", "WH2", 5)])

        summary = context.set_inventory().handle(
            "a", [InventoryInput("WH1", 7), InventoryInput("WH3", 2.5, reserved=1)]
        )

        assert summary.sku == "A"
        assert [(r.warehouse_code, r.on_hand, r.reserved) for r in summary.items] == [
            ("WH1", 7, 0),
            ("WH3", 3, 1),
        ]
        assert context.ledger.get("A", "WH2") is None
        assert context.ledger.totals_for_sku("A") == InventoryTotals(10, 1)

    def test_new_stock_becomes_reservable(self):
        context = make_context()
        context.set_inventory().handle("A", [InventoryInput("WH1", 4)])

        order = context.create_sales_order().handle(
            CreateSalesOrderInput(customer_id="c1", lines=[SalesOrderLineInput("A", 4)])
        )

        assert order.lines[0].ordered_qty == 4
        with pytest.raises(InsufficientStockError):
            context.create_sales_order().handle(
                CreateSalesOrderInput(customer_id="c1", lines=[SalesOrderLineInput("A", 1)])
            )

    def test_reserved_clamped_to_on_hand(self):
        context = make_context([record("A", "WH1", 10, 4)])

        summary = context.set_inventory().handle("A", [InventoryInput("WH1", 2, reserved=5)])

        assert [(r.on_hand, r.reserved) for r in summary.items] == [(2, 2)]
        assert context.ledger.get("A", "WH1").reserved == 2
        assert context.allocator.available("A") == 0

    def test_invalid_record_rejected(self):
        context = make_context([record("A", "WH1", 10)])
        with pytest.raises(ValidationError):
            context.set_inventory().handle(
                "A", [InventoryInput("WH2", 3), InventoryInput(" ", 2)]
            )
        assert context.ledger.get("A", "WH1").on_hand == 10
        assert context.ledger.get("A", "WH2") is None


class TestShowInventory:

    def test_report(self):
        context = make_context(
            [record("B", "WH1", 4, 1), record("A", "WH1", 10, 2), record("A", "WH2", 5)]
        )

        report = context.show_inventory().handle()

        assert report.lines == [
            InventoryLineDTO(sku="A", total=15, reserved=2, available=13),
            InventoryLineDTO(sku="B", total=4, reserved=1, available=3),
        ]
        assert [(w.warehouse_code, w.on_hand, w.reserved) for w in report.warehouses] == [
            ("WH1", 14, 3),
            ("WH2", 5, 0),
        ]
        assert report.overall == InventoryTotals(19, 3)

    def test_empty(self):
        report = make_context().show_inventory().handle()
        assert report.lines == []
        assert report.overall.is_empty
