"""Fixed-capacity slot buffer with insert/delete shift semantics.

Rule of thumb:
- The buffer never grows or shrinks; it always holds exactly `size` slots.
- Inserting shifts the tail right and drops whatever sat in the last slot.
- Deleting shifts the tail left and empties the last slot.
"""
from typing import Dict, List, Optional, Tuple

from array_heist.domain.errors import EmptySlot, InvalidDigit, OutOfBounds
from array_heist.domain.item_registry import ItemRegistry

DEFAULT_SLOT_COUNT = 10


def is_integer(value) -> bool:
    """True for real ints; bools are rejected even though they subclass int."""
    return isinstance(value, int) and not isinstance(value, bool)


class SlotBuffer:
    def __init__(self, registry: ItemRegistry, size: int = DEFAULT_SLOT_COUNT):
        if size < 1:
            raise ValueError("size must be at least 1")
        self.size = size
        self.registry = registry
        self._slots: List[Optional[int]] = [None] * size

    def _check_index(self, index) -> None:
        if not is_integer(index) or not 0 <= index < self.size:
            raise OutOfBounds(
                f"Index out of bounds! (0-{self.size - 1})",
                index=index if is_integer(index) else None,
            )

    def insert(self, index: int, value: int) -> int:
        """Place a new item at index, shifting later items one slot to the right.

        Args:
            index (int): Target slot, 0 <= index < size
            value (int): Digit 0-9

        Raises:
            OutOfBounds: index is not a slot of this buffer (checked first)
            InvalidDigit: value is not a single digit

        Returns:
            int: id of the newly created item
        """
        self._check_index(index)
        if not is_integer(value) or not 0 <= value <= 9:
            raise InvalidDigit("Enter a digit value between 0-9.", index=index)

        # The last slot is always lost on insert, full buffer or not.
        dropped = self._slots[-1]
        self._slots[index + 1:] = self._slots[index:-1]
        item_id = self.registry.create(value)
        self._slots[index] = item_id
        if dropped is not None:
            self.registry.discard(dropped)
        return item_id

    def delete(self, index: int) -> int:
        """Remove the item at index, shifting later items one slot to the left.

        Raises:
            OutOfBounds: index is not a slot of this buffer
            EmptySlot: nothing to delete at index

        Returns:
            int: id of the removed item
        """
        self._check_index(index)
        removed = self._slots[index]
        if removed is None:
            raise EmptySlot(f"No element at index {index} to delete.", index=index)

        self._slots[index:-1] = self._slots[index + 1:]
        self._slots[-1] = None
        self.registry.discard(removed)
        return removed

    def clear(self) -> None:
        self._slots = [None] * self.size

    def values_snapshot(self) -> Tuple[Optional[int], ...]:
        """Digits per slot (None for empty), copied at call time."""
        return tuple(
            None if item_id is None else self.registry.lookup(item_id).value
            for item_id in self._slots
        )

    def ids_snapshot(self) -> Tuple[Optional[int], ...]:
        return tuple(self._slots)

    def layout(self) -> Dict[int, int]:
        """Map item id -> slot index for every occupied slot."""
        return {item_id: index for index, item_id in enumerate(self._slots) if item_id is not None}

    def clamp_index(self, index) -> int:
        """Pull an arbitrary index into range for display purposes."""
        if not is_integer(index):
            return 0
        return max(0, min(self.size - 1, index))

    def __len__(self) -> int:
        return self.size
