"""Summary, per-position, dashboard and map projections."""
from palletwms.models import ReceiptLine
from palletwms.services.reporting import (
    dashboard_stats,
    inventory_by_position,
    summarize_by_sku,
    warehouse_map,
)
from palletwms.services.ledger import InventoryLedger
from palletwms.services.slots import SlotRegistry

from conftest import receive


def test_empty_ledger():
    slots = SlotRegistry()
    ledger = InventoryLedger(slots)
    assert summarize_by_sku(ledger) == []
    assert inventory_by_position(slots, ledger) == []
    stats = dashboard_stats(slots, ledger)
    assert stats.total_positions == 0
    assert stats.occupancy_pct == 0
    assert stats.categories == {}


def test_summary_groups_lots_under_one_sku(store):
    receive(store, "B", "R1.04.001", "L1", 1)
    receive(store, "A", "R1.01.001", "L2", 4)
    receive(store, "A", "R1.02.001", "L1", 6)
    receive(store, "A", "R1.03.001", "L2", 5)

    summary = summarize_by_sku(store.ledger)
    assert [s.sku for s in summary] == ["A", "B"]

    a = summary[0]
    assert a.total_quantity == 15
    assert [lot.lot_number for lot in a.lots] == ["L2", "L1"]
    assert a.lots[0].quantity == 9
    assert a.lots[0].positions == ["R1.01.001", "R1.03.001"]
    assert a.lots[1].positions == ["R1.02.001"]


def test_inventory_by_position_lists_only_held_slots(store):
    receive(store, "A", "R1.02.003", "L1", 2)
    receive(store, "A", "R1.01.001", "L1", 3)
    rows = inventory_by_position(store.slots, store.ledger)
    assert [r.slot_id for r in rows] == ["R1.01.001", "R1.02.003"]
    assert rows[1].level == 3
    assert rows[1].total_quantity == 2


def test_dashboard_figures(store):
    # 12 positions from the fixture
    receive(store, "A", "R1.01.001", "L1", 5, category="Sacaria")
    receive(store, "B", "R1.01.002", "L1", 2, category="Óleo")
    receive(store, "C", "R1.01.003", "L1", 1, category="Sacaria")
    receive(store, "D", "R1.02.001", "L1", 1, category="Leite")
    stats = dashboard_stats(store.slots, store.ledger)
    assert stats.total_positions == 12
    assert stats.occupied_positions == 4
    assert stats.free_positions == 8
    assert stats.occupancy_pct == 33
    assert stats.total_units == 9
    assert stats.categories == {"Sacaria": 2, "Óleo": 1, "Leite": 1}
    assert [r.sku for r in stats.recent_entries] == ["D", "C", "B", "A"]


def test_occupancy_rounds_half_up():
    slots = SlotRegistry()
    slots.add_range("R", "1", (1, 8), (1, 1))
    ledger = InventoryLedger(slots)
    # 1 of 8 = 12.5 %
    ledger.receive(ReceiptLine(sku="A", quantity=1, lot_number="L", slot_id="R1.01.001"))
    assert dashboard_stats(slots, ledger).occupancy_pct == 13


def test_recent_entries_keeps_last_five(store):
    for i, slot_id in enumerate(store.slots.ids()[:7], start=1):
        receive(store, f"S{i}", slot_id, "L1", 1)
    stats = dashboard_stats(store.slots, store.ledger)
    assert [r.sku for r in stats.recent_entries] == ["S7", "S6", "S5", "S4", "S3"]


def test_map_layout():
    slots = SlotRegistry()
    slots.add_range("R", "10", (1, 1), (1, 1))
    slots.add_range("R", "2", (1, 2), (1, 2))
    ledger = InventoryLedger(slots)
    ledger.receive(ReceiptLine(sku="A", quantity=1, lot_number="L", slot_id="R2.02.001"))
    aisles = warehouse_map(slots, ledger)
    assert [a.aisle for a in aisles] == ["2", "10"]
    assert [lv.level for lv in aisles[0].levels] == [2, 1]
    bottom = aisles[0].levels[1]
    assert [c.slot for c in bottom.cells] == [1, 2]
    assert bottom.cells[1].is_occupied is True
    assert bottom.cells[1].record.sku == "A"
    assert bottom.cells[0].record is None
