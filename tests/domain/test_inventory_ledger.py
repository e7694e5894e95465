"""Unit tests for the InventoryLedger domain service."""

import pytest

from wms.domain.exceptions import ValidationError
from wms.domain.model.inventory import InventoryTotals
from wms.domain.service.inventory_ledger import InventoryLedger
from tests.fakes import record


def _recomputed(ledger: InventoryLedger):
    """Totals summed from scratch, to compare with the delta-maintained ones."""
    by_sku: dict[str, InventoryTotals] = {}
    by_wh: dict[str, InventoryTotals] = {}
    overall = InventoryTotals()
    for rec in ledger.list_all():
        by_sku[rec.sku] = by_sku.get(rec.sku, InventoryTotals()).plus(rec.on_hand, rec.reserved)
        by_wh[rec.warehouse_code] = by_wh.get(
            rec.warehouse_code, InventoryTotals()
        ).plus(rec.on_hand, rec.reserved)
        overall = overall.plus(rec.on_hand, rec.reserved)
    by_sku = {k: v for k, v in by_sku.items() if not v.is_empty}
    by_wh = {k: v for k, v in by_wh.items() if not v.is_empty}
    return by_sku, by_wh, overall


def _assert_consistent(ledger: InventoryLedger) -> None:
    by_sku, by_wh, overall = _recomputed(ledger)
    for sku in ledger.skus():
        assert ledger.totals_for_sku(sku) == by_sku.get(sku, InventoryTotals())
    assert ledger.totals_by_warehouse() == by_wh
    assert ledger.totals() == overall


class TestUpsert:

    def test_insert_updates_all_tiers(self):
        ledger = InventoryLedger()
        ledger.upsert(record("A", "WH1", 10, 2))
        ledger.upsert(record("A", "WH2", 5))
        ledger.upsert(record("B", "WH1", 3, 3))

        assert ledger.totals_for_sku("A") == InventoryTotals(15, 2)
        assert ledger.totals_by_warehouse()["WH1"] == InventoryTotals(13, 5)
        assert ledger.totals() == InventoryTotals(18, 5)
        _assert_consistent(ledger)

    def test_replace_applies_delta(self):
        ledger = InventoryLedger([record("A", "WH1", 10, 2)])
        ledger.upsert(record("A", "WH1", 8, 8))
        assert ledger.totals_for_sku("A") == InventoryTotals(8, 8)
        assert ledger.totals_for_sku("A").available == 0
        _assert_consistent(ledger)

    def test_lookup_is_case_insensitive(self):
        ledger = InventoryLedger([record("abc", "WH1", 4)])
        assert ledger.get("ABC", "WH1") is not None
        assert ledger.totals_for_sku(" abc ").on_hand == 4

    def test_zero_record_leaves_no_totals_entry(self):
        ledger = InventoryLedger([record("A", "WH1", 0)])
        assert ledger.get("A", "WH1") is not None
        assert ledger.totals_by_warehouse() == {}
        assert ledger.totals_for_sku("A") == InventoryTotals()


class TestRemove:

    def test_remove_returns_record_and_drops_empty_tiers(self):
        ledger = InventoryLedger([record("A", "WH1", 10, 2), record("B", "WH2", 1)])
        removed = ledger.remove("A", "WH1")
        assert removed is not None and removed.on_hand == 10
        assert "WH1" not in ledger.totals_by_warehouse()
        assert ledger.skus() == ["B"]
        _assert_consistent(ledger)

    def test_remove_missing_is_none(self):
        assert InventoryLedger().remove("A", "WH1") is None

    def test_delete_for_warehouse(self):
        ledger = InventoryLedger(
            [record("A", "WH1", 10), record("B", "WH1", 5), record("A", "WH2", 1)]
        )
        ledger.delete_for_warehouse("WH1")
        assert [r.key for r in ledger.list_all()] == [("A", "WH2")]
        _assert_consistent(ledger)

    def test_delete_for_sku(self):
        ledger = InventoryLedger([record("A", "WH1", 10), record("A", "WH2", 5), record("B", "WH1", 1)])
        ledger.delete_for_sku("a")
        assert ledger.skus() == ["B"]
        assert ledger.totals() == InventoryTotals(1, 0)


class TestReplaceForSku:

    def test_drops_warehouses_missing_from_new_list(self):
        ledger = InventoryLedger(
            [record("A", "WH1", 10), record("A", "WH2", 5), record("B", "WH1", 7)]
        )
        ledger.replace_for_sku("A", [record("A", "WH1", 4, 1), record("A", "WH3", 2)])

        assert sorted(r.warehouse_code for r in ledger.list_for_sku("A")) == ["WH1", "WH3"]
        assert ledger.get("B", "WH1").on_hand == 7
        assert ledger.totals_for_sku("A") == InventoryTotals(6, 1)
        _assert_consistent(ledger)

    def test_empty_list_clears_sku(self):
        ledger = InventoryLedger([record("A", "WH1", 10)])
        ledger.replace_for_sku("A", [])
        assert ledger.list_for_sku("A") == []
        assert ledger.totals() == InventoryTotals()

    def test_foreign_sku_rejected_without_writes(self):
        ledger = InventoryLedger([record("A", "WH1", 10)])
        with pytest.raises(ValidationError):
            ledger.replace_for_sku("A", [record("A", "WH2", 3), record("B", "WH1", 1)])
        assert [r.key for r in ledger.list_all()] == [("A", "WH1")]


class TestSummarize:

    def test_items_sorted_by_warehouse(self):
        ledger = InventoryLedger([record("A", "WH2", 5, 1), record("A", "WH1", 10, 4)])
        summary = ledger.summarize("a")
        assert summary.sku == "A"
        assert [r.warehouse_code for r in summary.items] == ["WH1", "WH2"]
        assert summary.total_on_hand == 15
        assert summary.total_reserved == 5
        assert summary.total_available == 10

    def test_unknown_sku(self):
        summary = InventoryLedger().summarize("X")
        assert summary.items == []
        assert summary.total_available == 0
