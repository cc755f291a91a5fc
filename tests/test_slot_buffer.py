"""
Testing the fixed-capacity slot buffer.
"""
import pytest

from array_heist.domain.errors import EmptySlot, InvalidDigit, OutOfBounds, UnknownId
from array_heist.domain.item_registry import ItemRegistry
from array_heist.domain.slot_buffer import SlotBuffer

_ = None


def make_buffer(values=(), size=10):
    buffer = SlotBuffer(ItemRegistry(), size)
    for index, value in enumerate(values):
        buffer.insert(index, value)
    return buffer


def test_insert_at_front_shifts_right():
    buffer = make_buffer()
    buffer.insert(0, 3)
    assert buffer.values_snapshot() == (3, _, _, _, _, _, _, _, _, _)
    buffer.insert(0, 7)
    assert buffer.values_snapshot() == (7, 3, _, _, _, _, _, _, _, _)
    buffer.insert(0, 1)
    assert buffer.values_snapshot() == (1, 7, 3, _, _, _, _, _, _, _)


def test_insert_into_full_buffer_truncates_tail():
    buffer = make_buffer(range(10))
    assert buffer.values_snapshot() == (0, 1, 2, 3, 4, 5, 6, 7, 8, 9)
    tail_id = buffer.ids_snapshot()[-1]

    buffer.insert(0, 5)

    assert buffer.values_snapshot() == (5, 0, 1, 2, 3, 4, 5, 6, 7, 8)
    assert len(buffer) == 10
    # The dropped item is gone from the registry, not just from the buffer.
    assert tail_id not in buffer.registry


def test_insert_at_last_index_replaces_last_slot():
    buffer = make_buffer(range(10))
    buffer.insert(9, 4)
    assert buffer.values_snapshot() == (0, 1, 2, 3, 4, 5, 6, 7, 8, 4)


def test_insert_into_gap_leaves_items_before_index_alone():
    buffer = make_buffer([1, 2])
    buffer.insert(5, 9)
    assert buffer.values_snapshot() == (1, 2, _, _, _, 9, _, _, _, _)


def test_delete_shifts_left_and_empties_last_slot():
    buffer = make_buffer([1, 7, 3])
    removed = buffer.ids_snapshot()[0]
    assert buffer.delete(0) == removed
    assert buffer.values_snapshot() == (7, 3, _, _, _, _, _, _, _, _)


def test_delete_from_full_buffer():
    buffer = make_buffer(range(10))
    buffer.delete(4)
    assert buffer.values_snapshot() == (0, 1, 2, 3, 5, 6, 7, 8, 9, _)


def test_delete_last_remaining_item_leaves_buffer_empty():
    buffer = make_buffer([6])
    buffer.delete(0)
    assert buffer.values_snapshot() == (_,) * 10
    assert len(buffer.registry) == 0


def test_delete_empty_slot_reports_and_does_not_mutate():
    buffer = make_buffer([1, 2])
    before = buffer.ids_snapshot()
    for index in (2, 5, 9):
        with pytest.raises(EmptySlot) as excinfo:
            buffer.delete(index)
        assert excinfo.value.index == index
    assert buffer.ids_snapshot() == before


@pytest.mark.parametrize("index", [-1, 10, 42])
def test_out_of_range_index_never_mutates(index):
    buffer = make_buffer([4, 2])
    before = buffer.ids_snapshot()
    with pytest.raises(OutOfBounds):
        buffer.insert(index, 3)
    with pytest.raises(OutOfBounds):
        buffer.delete(index)
    assert buffer.ids_snapshot() == before


@pytest.mark.parametrize("value", [-1, 10, 3.0, True, "4"])
def test_invalid_digit_never_mutates(value):
    buffer = make_buffer([4, 2])
    before = buffer.ids_snapshot()
    with pytest.raises(InvalidDigit):
        buffer.insert(0, value)
    assert buffer.ids_snapshot() == before
    assert len(buffer.registry) == 2


def test_index_error_takes_precedence_over_value_error():
    buffer = make_buffer()
    with pytest.raises(OutOfBounds):
        buffer.insert(10, 99)


def test_insert_then_delete_restores_contents_and_identities():
    buffer = make_buffer([1, 2, 3, 4])
    before = buffer.ids_snapshot()
    for index in range(10):
        buffer.insert(index, 8)
        buffer.delete(index)
        assert buffer.ids_snapshot() == before


def test_snapshot_is_not_a_live_view():
    buffer = make_buffer([1])
    snapshot = buffer.values_snapshot()
    buffer.insert(0, 2)
    assert snapshot == (1, _, _, _, _, _, _, _, _, _)


def test_every_slot_resolves_in_registry():
    buffer = make_buffer(range(10))
    for value in (9, 9, 9):
        buffer.insert(3, value)
    buffer.delete(0)
    for item_id in buffer.ids_snapshot():
        if item_id is not None:
            assert item_id in buffer.registry


def test_dangling_id_surfaces_as_unknown_id():
    buffer = make_buffer([1])
    buffer.registry.reset()
    with pytest.raises(UnknownId):
        buffer.values_snapshot()


def test_clear_and_layout():
    buffer = make_buffer([5, 6])
    first, second = buffer.ids_snapshot()[:2]
    assert buffer.layout() == {first: 0, second: 1}
    buffer.clear()
    assert buffer.layout() == {}
    assert buffer.values_snapshot() == (_,) * 10


def test_clamp_index():
    buffer = make_buffer()
    assert buffer.clamp_index(-5) == 0
    assert buffer.clamp_index(12) == 9
    assert buffer.clamp_index(4) == 4
