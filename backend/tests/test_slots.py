"""Tests for the slot registry: creation, bulk ranges, ordering, deletion."""
import pytest

from palletwms.core.errors import DuplicateSlotError, SlotOccupiedError, UnknownSlotError
from palletwms.models import build_slot, format_slot_id
from palletwms.services.slots import SlotRegistry

from conftest import receive


def test_format_slot_id():
    assert format_slot_id("R", "1", 7, 12) == "R1.07.012"
    assert format_slot_id("R", "1", 1, 1) == "R1.01.001"


def test_add_and_duplicate():
    reg = SlotRegistry()
    reg.add(build_slot("R", "1", 1, 1))
    with pytest.raises(DuplicateSlotError) as ei:
        reg.add(build_slot("R", "1", 1, 1))
    assert ei.value.slot_id == "R1.01.001"
    assert len(reg) == 1


def test_numeric_aware_ordering():
    """R1.02 sorts before R1.10, aisle 2 before aisle 10."""
    reg = SlotRegistry()
    reg.add(build_slot("R", "1", 10, 1))
    reg.add(build_slot("R", "10", 1, 1))
    reg.add(build_slot("R", "1", 2, 1))
    reg.add(build_slot("R", "2", 1, 1))
    assert reg.ids() == ["R1.02.001", "R1.10.001", "R2.01.001", "R10.01.001"]


def test_range_generates_cartesian_product():
    reg = SlotRegistry()
    created = reg.add_range("R", "1", (1, 2), (1, 2))
    assert created == 4
    assert reg.ids() == ["R1.01.001", "R1.01.002", "R1.02.001", "R1.02.002"]


def test_range_twice_creates_no_duplicates():
    reg = SlotRegistry()
    assert reg.add_range("R", "1", (1, 2), (1, 2)) == 4
    assert reg.add_range("R", "1", (1, 2), (1, 2)) == 0
    assert len(reg) == 4


def test_range_skips_existing_silently():
    reg = SlotRegistry()
    reg.add(build_slot("R", "1", 2, 1))
    assert reg.add_range("R", "1", (1, 2), (1, 2)) == 3
    assert len(reg) == 4


def test_empty_range_creates_nothing():
    reg = SlotRegistry()
    assert reg.add_range("R", "1", (3, 2), (1, 1)) == 0
    assert len(reg) == 0


def test_range_slot_attributes():
    reg = SlotRegistry()
    reg.add_range("R", "1", (7, 7), (12, 12))
    slot = reg.require("R1.07.012")
    assert (slot.aisle, slot.slot, slot.level) == ("1", 7, 12)
    assert slot.is_occupied is False
    assert slot.product_id is None


class TestDelete:
    def test_delete_free_slot(self):
        reg = SlotRegistry()
        reg.add_range("R", "1", (1, 1), (1, 2))
        reg.delete("R1.01.001")
        assert reg.ids() == ["R1.01.002"]

    def test_delete_unknown_slot(self):
        with pytest.raises(UnknownSlotError):
            SlotRegistry().delete("R9.99.999")

    def test_delete_occupied_slot_is_blocked(self, store):
        receive(store, "SKU1", "R1.01.001", "L1", 5)
        with pytest.raises(SlotOccupiedError):
            store.slots.delete("R1.01.001")
        assert "R1.01.001" in store.slots


def test_free_slots_and_occupied_count(store):
    total = len(store.slots)
    receive(store, "SKU1", "R1.01.001", "L1", 5)
    assert store.slots.occupied_count() == 1
    free_ids = [s.id for s in store.slots.free_slots()]
    assert "R1.01.001" not in free_ids
    assert len(free_ids) == total - 1
