"""Rows, columns and regions of a puzzle, extracted in checking order."""

from typing import Optional

from sudoku_checker.models.puzzle import (
    GRID_SIZE,
    GROUP_ORDER,
    Group,
    GroupInvalid,
    GroupKind,
    Puzzle,
)
from sudoku_checker.validation.regions import get_region_table


def groups(puzzle: Puzzle, kind: GroupKind) -> tuple[Group, ...]:
    """Return the nine groups of the given kind.

    Args:
        puzzle: Well-formed 9×9 puzzle (see ``as_puzzle``)
        kind: Which groups to extract

    Returns:
        Nine tuples of nine values. Columns are a logical transpose and
        regions follow the region table's coordinate order; the puzzle
        itself is never modified.
    """
    if kind == GroupKind.ROW:
        return tuple(tuple(row) for row in puzzle)
    if kind == GroupKind.COLUMN:
        return tuple(
            tuple(puzzle[row][col] for row in range(GRID_SIZE))
            for col in range(GRID_SIZE)
        )
    if kind == GroupKind.REGION:
        return tuple(
            tuple(puzzle[row][col] for row, col in region)
            for region in get_region_table()
        )
    raise ValueError(f"Unknown group kind: {kind!r}")


def is_valid(group: Group) -> bool:
    """True iff the group holds nine distinct values. Values are not range-checked."""
    return len(set(group)) == GRID_SIZE


def find_first_invalid(puzzle: Puzzle) -> Optional[GroupInvalid]:
    """Synchronous, unpaced check in the same order the sequencer uses."""
    for kind in GROUP_ORDER:
        for index, group in enumerate(groups(puzzle, kind)):
            if not is_valid(group):
                return GroupInvalid(kind=kind, index=index)
    return None
