"""
Tests for fractional ordering: insert positions and drop-zone resolution.
"""
import pytest

from app.core.ordering import (
    DropZone,
    compute_insert_order,
    drop_order,
    end_order,
    resolve_drop_zone,
)


def test_empty_list_starts_at_one():
    assert compute_insert_order(None, None) == 1


def test_append_after_last():
    assert compute_insert_order(3, None) == 4


def test_between_neighbours_is_midpoint():
    assert compute_insert_order(1, 2) == 1.5


def test_before_first_treats_missing_predecessor_as_zero():
    assert compute_insert_order(None, 1) == 0.5


@pytest.mark.parametrize("prev,nxt", [(0, 1), (1, 2), (1.5, 1.75), (-3, 7), (2, 2.0000001)])
def test_result_strictly_between(prev, nxt):
    order = compute_insert_order(prev, nxt)
    assert prev < order < nxt


def test_repeated_appends_increase_by_one():
    orders = []
    for _ in range(5):
        orders.append(end_order(orders))
    assert orders == [1, 2, 3, 4, 5]


def test_repeated_inserts_halve_the_gap():
    low, high = 1, 2
    for _ in range(10):
        high = compute_insert_order(low, high)
    assert high == 1 + 2 ** -10


def test_deterministic():
    assert compute_insert_order(1.25, 8) == compute_insert_order(1.25, 8)


def test_drop_zone_from_pointer():
    assert resolve_drop_zone(10, 0, 40) == DropZone.TOP
    assert resolve_drop_zone(20, 0, 40) == DropZone.TOP  # midpoint counts as top
    assert resolve_drop_zone(21, 0, 40) == DropZone.BOTTOM


def test_drop_above_middle_card():
    # between predecessor (1) and target (2)
    assert drop_order([1, 2, 3], 1, DropZone.TOP) == 1.5


def test_drop_below_middle_card():
    # between target (2) and successor (3)
    assert drop_order([1, 2, 3], 1, DropZone.BOTTOM) == 2.5


def test_drop_above_first_card():
    assert drop_order([1, 2], 0, DropZone.TOP) == 0.5


def test_drop_below_last_card():
    assert drop_order([1, 2], 1, DropZone.BOTTOM) == 3


def test_drop_on_empty_column():
    assert drop_order([], 0, DropZone.NONE) == 1


def test_drop_without_zone_rejected():
    with pytest.raises(ValueError):
        drop_order([1, 2], 0, DropZone.NONE)


def test_drop_target_out_of_range():
    with pytest.raises(IndexError):
        drop_order([1, 2], 5, DropZone.TOP)
