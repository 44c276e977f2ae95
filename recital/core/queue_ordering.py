"""Queue Ordering — pure planning of the dense 1..N exhibition queue positions.

Invariants:
    - Positions are 1-based, unique and gap-free at every quiescent moment
    - Every plan_* function is PURE: it returns a PositionShift descriptor and
      never touches storage — the shell applies the shift inside one transaction
    - Range bounds are inclusive; end=None means "to the end of the queue"

Design Decisions:
    - Shift descriptors over row lists: one UPDATE ... WHERE position BETWEEN
      covers the whole range regardless of queue length
    - Range validation lives here (not in routes) so the service and bulk
      enqueue share one definition of "in range"
"""

from dataclasses import dataclass

from recital.core.errors import InvalidArgumentError


@dataclass(frozen=True)
class PositionShift:
    """Move every position in [start, end] by delta."""
    start: int
    end: int | None
    delta: int

    def covers(self, position: int) -> bool:
        if position < self.start:
            return False
        return self.end is None or position <= self.end


@dataclass(frozen=True)
class InsertPlan:
    """Where a new block of entries lands and what must make room for it."""
    position: int
    shift: PositionShift | None


def append_position(current_max: int | None) -> int:
    """Next free slot at the tail of the queue."""
    return (current_max or 0) + 1


def check_insert_position(count: int, position: int) -> None:
    """Reject insert positions that would open a gap in a queue of `count`."""
    if position < 1 or position > count + 1:
        raise InvalidArgumentError(
            f"Position {position} out of range (1..{count + 1})", "position",
        )


def plan_insert(
    count: int,
    desired_position: int | None = None,
    span: int = 1,
    current_max: int | None = None,
) -> InsertPlan:
    """Plan insertion of `span` consecutive entries into a queue of `count`.

    Without a desired position the block is appended after current_max
    (falling back to count). With one, everything at or after it moves back
    by `span`. Positions past count + 1 would open a gap and are rejected.
    """
    if desired_position is None:
        return InsertPlan(
            position=append_position(
                count if current_max is None else current_max,
            ),
            shift=None,
        )
    check_insert_position(count, desired_position)
    if desired_position == count + 1:
        return InsertPlan(position=desired_position, shift=None)
    return InsertPlan(
        position=desired_position,
        shift=PositionShift(start=desired_position, end=None, delta=span),
    )


def plan_remove(removed_position: int) -> PositionShift:
    """Close the gap left by a removed entry."""
    return PositionShift(start=removed_position + 1, end=None, delta=-1)


def plan_move(
    old_position: int, new_position: int, count: int,
) -> PositionShift | None:
    """Plan the neighbour shift for moving one entry. None means no-op."""
    if new_position < 1 or new_position > count:
        raise InvalidArgumentError(
            f"Position {new_position} out of range (1..{count})", "position",
        )
    if new_position == old_position:
        return None
    if new_position > old_position:
        # moving later: (old, new] slides forward
        return PositionShift(start=old_position + 1, end=new_position, delta=-1)
    # moving earlier: [new, old) slides back
    return PositionShift(start=new_position, end=old_position - 1, delta=1)


def plan_compaction(positions: list[int]) -> list[tuple[int, int]]:
    """Pairs of (current, target) needed to renumber sorted positions to 1..N."""
    return [
        (current, target)
        for target, current in enumerate(sorted(positions), start=1)
        if current != target
    ]


def is_dense(positions: list[int]) -> bool:
    """True when positions are exactly {1..N}."""
    return sorted(positions) == list(range(1, len(positions) + 1))
