"""Integration tests for the order query use cases: get, list and next-number preview."""

import pytest

from wms.application.dto import CreateSalesOrderInput, SalesOrderLineInput, SalesOrderListFilters
from wms.domain.exceptions import EntityNotFoundError, ValidationError
from tests.fakes import make_context, record


def _setup():
    context = make_context([record("A", "WH1", 100)])
    create = context.create_sales_order()
    orders = {}
    for tenant, order_date in [
        ("t1", "2024-05-01"),
        ("t1", "2024-05-15"),
        ("t2", "2024-05-15"),
        ("t1", "2024-03-01"),
    ]:
        order = create.handle(
            CreateSalesOrderInput(
                tenant_id=tenant,
                customer_id="c1",
                order_date=order_date,
                lines=[SalesOrderLineInput("A", 1)],
            )
        )
        orders[(tenant, order_date)] = order
    return context, orders


def _dates(orders) -> list[tuple[str, str]]:
    return sorted((o.tenant_id, o.order_date) for o in orders)


class TestListSalesOrders:

    def test_no_filters_returns_everything(self):
        context, _ = _setup()
        assert len(context.list_sales_orders().handle()) == 4

    def test_tenant_filter(self):
        context, _ = _setup()
        result = context.list_sales_orders().handle(SalesOrderListFilters(tenant_id=" t2 "))
        assert _dates(result) == [("t2", "2024-05-15")]

    def test_inclusive_date_range(self):
        context, _ = _setup()
        result = context.list_sales_orders().handle(
            SalesOrderListFilters(from_="2024-05-01", to="2024-05-15", tenant_id="t1")
        )
        assert _dates(result) == [("t1", "2024-05-01"), ("t1", "2024-05-15")]

    def test_open_end_uses_now_for_length_check(self):
        context, _ = _setup()
        result = context.list_sales_orders().handle(SalesOrderListFilters(from_="2024-04-01"))
        assert len(result) == 3

    def test_start_after_end_rejected(self):
        context, _ = _setup()
        with pytest.raises(ValidationError, match="after its end"):
            context.list_sales_orders().handle(
                SalesOrderListFilters(from_="2024-05-15", to="2024-05-01")
            )

    def test_range_over_a_year_rejected(self):
        context, _ = _setup()
        with pytest.raises(ValidationError, match="365 days"):
            context.list_sales_orders().handle(
                SalesOrderListFilters(from_="2023-01-01", to="2024-05-15")
            )

    def test_open_ended_range_over_a_year_rejected(self):
        context, _ = _setup()
        with pytest.raises(ValidationError, match="365 days"):
            context.list_sales_orders().handle(SalesOrderListFilters(from_="2023-01-01"))

    def test_unparseable_bound_rejected(self):
        context, _ = _setup()
        with pytest.raises(ValidationError, match="Invalid range start"):
            context.list_sales_orders().handle(SalesOrderListFilters(from_="last week"))


class TestGetSalesOrder:

    def test_found(self):
        context, orders = _setup()
        order = orders[("t1", "2024-05-15")]
        assert context.get_sales_order().handle(order.id, "t1").order_number == order.order_number

    def test_missing(self):
        context, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            context.get_sales_order().handle("SO-missing")

    def test_other_tenant_is_not_found(self):
        context, orders = _setup()
        with pytest.raises(EntityNotFoundError):
            context.get_sales_order().handle(orders[("t1", "2024-05-15")].id, "t2")


class TestPeekSalesOrderNumber:

    def test_next_after_existing_orders(self):
        context, _ = _setup()
        preview = context.peek_sales_order_number().handle("t1", "2024-05-15")
        assert preview.order_number == "SO-20240515-002"
        assert preview.sequence == 2

    def test_peek_does_not_consume(self):
        context, _ = _setup()
        handler = context.peek_sales_order_number()
        handler.handle("t2", "2024-05-15")
        assert handler.handle("t2", "2024-05-15").sequence == 2

    def test_defaults_to_today_and_default_tenant(self):
        context, _ = _setup()
        preview = context.peek_sales_order_number().handle()
        assert preview.tenant_id == "default"
        assert preview.order_number == "SO-20240515-001"

    def test_invalid_date_rejected(self):
        context, _ = _setup()
        with pytest.raises(ValidationError, match="Invalid order date"):
            context.peek_sales_order_number().handle("t1", "2024-02-30")
