"""Identity diff between two buffer layouts.

A layout maps item id -> slot index. Comparing the layout before and after an
operation tells the client which chips stayed put, which slid, which are new
and which fell off the board.
"""
from dataclasses import dataclass
from typing import Mapping, Tuple


@dataclass(frozen=True)
class Move:
    item_id: int
    from_index: int
    to_index: int


@dataclass(frozen=True)
class LayoutDiff:
    unchanged: Tuple[int, ...] = ()
    moved: Tuple[Move, ...] = ()
    created: Tuple[int, ...] = ()
    removed: Tuple[int, ...] = ()


def diff_layouts(before: Mapping[int, int], after: Mapping[int, int]) -> LayoutDiff:
    unchanged = []
    moved = []
    created = []
    for item_id, index in sorted(after.items(), key=lambda entry: entry[1]):
        if item_id not in before:
            created.append(item_id)
        elif before[item_id] == index:
            unchanged.append(item_id)
        else:
            moved.append(Move(item_id, before[item_id], index))
    removed = [item_id for item_id, _ in sorted(before.items(), key=lambda entry: entry[1]) if item_id not in after]
    return LayoutDiff(
        unchanged=tuple(unchanged),
        moved=tuple(moved),
        created=tuple(created),
        removed=tuple(removed),
    )
