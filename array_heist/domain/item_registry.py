"""Stable identities for the digits placed in the slot buffer."""
from dataclasses import dataclass
from typing import Dict

from array_heist.domain.errors import UnknownId


@dataclass(frozen=True)
class Item:
    id: int
    value: int


class ItemRegistry:
    """Arena of items keyed by a monotonically increasing id.

    Ids are never handed out twice between resets, so a client can tell an item
    that moved apart from a different item that now sits at the same index.
    """

    def __init__(self):
        self._items: Dict[int, Item] = {}
        self._next_id = 1

    def create(self, value: int) -> int:
        item = Item(id=self._next_id, value=value)
        self._items[item.id] = item
        self._next_id += 1
        return item.id

    def lookup(self, item_id: int) -> Item:
        try:
            return self._items[item_id]
        except KeyError:
            raise UnknownId(item_id) from None

    def discard(self, item_id: int) -> None:
        self._items.pop(item_id, None)

    def reset(self) -> None:
        self._items.clear()
        self._next_id = 1

    def __contains__(self, item_id: int) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)
