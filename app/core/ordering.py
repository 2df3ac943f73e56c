"""
Fractional ordering for cards.

An item's ``order`` is a float; a column shows its items sorted ascending.
Moving an item only rewrites that item's order, picked between its new
neighbours, so no other row has to be renumbered.

Nothing here renormalizes. Dropping again and again into the same gap halves
it each time, and after roughly fifty halvings two neighbours can no longer
be told apart by a double.
"""
from enum import Enum
from typing import Optional, Sequence


class DropZone(str, Enum):
    NONE = "none"
    TOP = "top"
    BOTTOM = "bottom"


def compute_insert_order(previous_order: Optional[float], next_order: Optional[float]) -> float:
    """Return an order that sorts after ``previous_order`` and before ``next_order``.

    ``None`` stands for a missing neighbour: with no successor the result is
    ``previous_order + 1``, with no predecessor the predecessor is taken to be
    ``0``, and an empty list starts at ``1``.
    """
    if previous_order is None and next_order is None:
        return 1
    if next_order is None:
        return previous_order + 1
    if previous_order is None:
        previous_order = 0
    return (previous_order + next_order) / 2


def end_order(orders: Sequence[float]) -> float:
    """Order for a card appended to the bottom of a column."""
    return compute_insert_order(max(orders) if orders else None, None)


def resolve_drop_zone(pointer_y: float, rect_top: float, rect_bottom: float) -> DropZone:
    """Which half of a card's bounding box the pointer is over."""
    midpoint = (rect_top + rect_bottom) / 2
    return DropZone.TOP if pointer_y <= midpoint else DropZone.BOTTOM


def drop_order(orders: Sequence[float], target_index: int, zone: DropZone) -> float:
    """Order for a card dropped on the ``target_index``-th card of a column.

    ``orders`` are the column's current orders in display (ascending) order.
    Dropping on an empty column always yields ``1``.
    """
    if not orders:
        return compute_insert_order(None, None)
    if not 0 <= target_index < len(orders):
        raise IndexError(f"drop target {target_index} outside column of {len(orders)}")
    if zone == DropZone.NONE:
        raise ValueError("drop zone must be top or bottom")

    target = orders[target_index]
    if zone == DropZone.TOP:
        previous = orders[target_index - 1] if target_index > 0 else None
        return compute_insert_order(previous, target)

    following = orders[target_index + 1] if target_index + 1 < len(orders) else None
    return compute_insert_order(target, following)
