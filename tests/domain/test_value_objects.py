"""Unit tests for value objects and normalization helpers."""

from decimal import Decimal

import pytest

from wms.domain.exceptions import ValidationError
from wms.domain.model.value_objects import (
    OrderDateContext,
    SalesOrderNumberContext,
    clean_text,
    normalize_quantity,
    normalize_sku,
    normalize_tenant_id,
    to_decimal,
)


class TestNormalizeQuantity:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (3, 3),
            (2.5, 3),
            (2.4, 2),
            (0.5, 1),
            (0.4, 0),
            (-1, 0),
            (-2.6, 0),
            (Decimal("7.5"), 8),
        ],
    )
    def test_rounds_half_up_and_clamps(self, raw, expected):
        assert normalize_quantity(raw) == expected

    @pytest.mark.parametrize("raw", [None, float("nan"), float("inf"), float("-inf"), "abc", True])
    def test_unusable_values_become_zero(self, raw):
        assert normalize_quantity(raw) == 0


class TestTextHelpers:

    def test_normalize_sku(self):
        assert normalize_sku("  ab-12 ") == "AB-12"

    def test_tenant_defaults(self):
        assert normalize_tenant_id(None) == "default"
        assert normalize_tenant_id("   ") == "default"
        assert normalize_tenant_id(" t1 ") == "t1"
        assert normalize_tenant_id(None, "acme") == "acme"

    def test_clean_text(self):
        assert clean_text("  memo ") == "memo"
        assert clean_text("   ") is None
        assert clean_text(None) is None

    def test_to_decimal(self):
        assert to_decimal("12.50") == Decimal("12.50")
        assert to_decimal(3) == Decimal("3")
        assert to_decimal(None) is None
        assert to_decimal("n/a") is None
        assert to_decimal(float("nan")) is None


class TestOrderDateContext:

    def test_of_pads_fields(self):
        ctx = OrderDateContext.of(2024, 1, 5)
        assert ctx.date_key == "20240105"
        assert ctx.order_date == "2024-01-05"

    def test_mismatched_forms_rejected(self):
        with pytest.raises(ValidationError, match="does not match"):
            OrderDateContext(date_key="20240105", order_date="2024-01-06")

    def test_bad_date_key_rejected(self):
        with pytest.raises(ValidationError, match="Invalid date key"):
            OrderDateContext(date_key="2024015", order_date="2024-01-05")

    def test_number_context_uses_default_tenant(self):
        ctx = SalesOrderNumberContext.build(OrderDateContext.of(2024, 5, 15), "  ")
        assert ctx.tenant_id == "default"
        assert ctx.date_key == "20240515"
