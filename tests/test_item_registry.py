"""
Testing item identities.
"""
import pytest

from array_heist.domain.errors import UnknownId
from array_heist.domain.item_registry import Item, ItemRegistry


def test_ids_are_monotonic_and_never_reused():
    registry = ItemRegistry()
    first = registry.create(3)
    second = registry.create(3)
    registry.discard(second)
    third = registry.create(3)
    assert first < second < third


def test_lookup_returns_item():
    registry = ItemRegistry()
    item_id = registry.create(7)
    assert registry.lookup(item_id) == Item(id=item_id, value=7)


def test_lookup_unknown_id_raises():
    registry = ItemRegistry()
    with pytest.raises(UnknownId) as excinfo:
        registry.lookup(99)
    assert excinfo.value.item_id == 99


def test_discard_is_idempotent():
    registry = ItemRegistry()
    item_id = registry.create(1)
    registry.discard(item_id)
    registry.discard(item_id)
    assert item_id not in registry
    assert len(registry) == 0


def test_reset_restarts_ids():
    registry = ItemRegistry()
    registry.create(1)
    registry.create(2)
    registry.reset()
    assert len(registry) == 0
    assert registry.create(4) == 1
