"""Queue Ordering — tests for pure position planning.

Tests cover:
    - plan_insert appends after current max, shifts on positional insert
    - plan_insert rejects positions that would open a gap
    - plan_remove closes the gap behind the removed entry
    - plan_move shifts the right neighbours in both directions, no-op in place
    - plan_compaction / is_dense over sparse and dense inputs
    - random insert/remove/move sequences keep positions dense
"""

import random

import pytest

from recital.core.errors import InvalidArgumentError
from recital.core.queue_ordering import (
    PositionShift,
    append_position,
    check_insert_position,
    is_dense,
    plan_compaction,
    plan_insert,
    plan_move,
    plan_remove,
)


def _apply(queue: dict[str, int], shift: PositionShift | None) -> None:
    if shift is None:
        return
    for key, position in queue.items():
        if shift.covers(position):
            queue[key] = position + shift.delta


def _order(queue: dict[str, int]) -> list[str]:
    return sorted(queue, key=queue.get)


# ─── append / insert ─────────────────────────────────────────────

def test_append_position_on_empty_queue():
    assert append_position(None) == 1
    assert append_position(0) == 1


def test_append_position_after_max():
    assert append_position(7) == 8


def test_plan_insert_without_position_appends():
    plan = plan_insert(3)
    assert plan.position == 4
    assert plan.shift is None


def test_plan_insert_prefers_current_max():
    plan = plan_insert(3, current_max=5)
    assert plan.position == 6


def test_plan_insert_at_head_shifts_everything():
    plan = plan_insert(3, 1)
    assert plan.position == 1
    assert plan.shift == PositionShift(start=1, end=None, delta=1)


def test_plan_insert_at_tail_slot_needs_no_shift():
    plan = plan_insert(3, 4)
    assert plan.position == 4
    assert plan.shift is None


def test_plan_insert_span_shifts_by_block_size():
    plan = plan_insert(5, 2, span=3)
    assert plan.shift == PositionShift(start=2, end=None, delta=3)


@pytest.mark.parametrize("position", [0, -1, 5])
def test_plan_insert_rejects_out_of_range(position):
    with pytest.raises(InvalidArgumentError) as exc:
        plan_insert(3, position)
    assert exc.value.http_status == 400
    assert exc.value.field == "position"


@pytest.mark.parametrize("count, position", [(0, 1), (3, 1), (3, 4)])
def test_check_insert_position_accepts_1_to_n_plus_1(count, position):
    check_insert_position(count, position)


def test_check_insert_position_on_empty_queue():
    with pytest.raises(InvalidArgumentError, match=r"out of range \(1..1\)"):
        check_insert_position(0, 999)


def test_n_appends_are_dense():
    queue: dict[str, int] = {}
    for i in range(10):
        queue[f"r{i}"] = plan_insert(len(queue)).position
    assert sorted(queue.values()) == list(range(1, 11))


# ─── remove ──────────────────────────────────────────────────────

def test_plan_remove_shifts_tail_down():
    assert plan_remove(2) == PositionShift(start=3, end=None, delta=-1)


def test_remove_head_example():
    queue = {"A": 1, "B": 2, "C": 3}
    removed = queue.pop("A")
    _apply(queue, plan_remove(removed))
    assert queue == {"B": 1, "C": 2}


def test_remove_then_insert_same_position_never_collides():
    queue = {"A": 1, "B": 2, "C": 3}
    removed = queue.pop("B")
    _apply(queue, plan_remove(removed))
    plan = plan_insert(len(queue), removed)
    _apply(queue, plan.shift)
    assert plan.position not in queue.values()
    queue["D"] = plan.position
    assert _order(queue) == ["A", "D", "C"]
    assert is_dense(list(queue.values()))


# ─── move ────────────────────────────────────────────────────────

def test_move_to_head_example():
    queue = {"A": 1, "B": 2, "C": 3}
    shift = plan_move(3, 1, 3)
    queue["C"] = 0
    _apply(queue, shift)
    queue["C"] = 1
    assert queue == {"C": 1, "A": 2, "B": 3}


def test_move_later_shifts_between_down():
    assert plan_move(1, 3, 4) == PositionShift(start=2, end=3, delta=-1)


def test_move_earlier_shifts_between_up():
    assert plan_move(4, 2, 4) == PositionShift(start=2, end=3, delta=1)


def test_move_in_place_is_noop():
    assert plan_move(2, 2, 3) is None


@pytest.mark.parametrize("position", [0, 4])
def test_move_rejects_out_of_range(position):
    with pytest.raises(InvalidArgumentError):
        plan_move(1, position, 3)


def test_shift_covers_closed_and_open_ranges():
    closed = PositionShift(start=2, end=3, delta=1)
    assert not closed.covers(1)
    assert closed.covers(2) and closed.covers(3)
    assert not closed.covers(4)
    assert PositionShift(start=2, end=None, delta=-1).covers(99)


# ─── compaction / density ────────────────────────────────────────

def test_plan_compaction_renumbers_gaps():
    assert plan_compaction([1, 3, 7]) == [(3, 2), (7, 3)]


def test_plan_compaction_dense_is_empty():
    assert plan_compaction([2, 1, 3]) == []


def test_is_dense():
    assert is_dense([])
    assert is_dense([3, 1, 2])
    assert not is_dense([1, 3])
    assert not is_dense([1, 1, 2])
    assert not is_dense([0, 1])


def test_random_operation_sequences_stay_dense():
    rng = random.Random(1234)
    queue: dict[str, int] = {}
    for step in range(300):
        op = rng.choice(["insert", "insert_at", "remove", "move"])
        if op == "insert" or not queue:
            queue[f"r{step}"] = plan_insert(len(queue)).position
        elif op == "insert_at":
            plan = plan_insert(len(queue), rng.randint(1, len(queue) + 1))
            _apply(queue, plan.shift)
            queue[f"r{step}"] = plan.position
        elif op == "remove":
            key = rng.choice(list(queue))
            _apply(queue, plan_remove(queue.pop(key)))
        else:
            key = rng.choice(list(queue))
            target = rng.randint(1, len(queue))
            shift = plan_move(queue[key], target, len(queue))
            if shift is not None:
                queue[key] = 0
                _apply(queue, shift)
                queue[key] = target
        assert is_dense(list(queue.values())), f"not dense after {op} at {step}"
