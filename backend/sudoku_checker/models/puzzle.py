"""Puzzle models — grid shape, group kinds, findings, highlight state and run outcomes.

All checking is deterministic: same puzzle → same sequence of events → same outcome.
"""

from enum import Enum
from typing import Optional, Sequence, Tuple

from pydantic import BaseModel, Field

# Immutable 9×9 grid, row-major
Puzzle = Tuple[Tuple[int, ...], ...]
Coordinate = Tuple[int, int]
Group = Tuple[int, ...]

GRID_SIZE = 9
BOX_SIZE = 3


class GroupKind(str, Enum):
    """The three kinds of group, declared in checking order."""

    ROW = "row"
    COLUMN = "column"
    REGION = "region"

    @property
    def label(self) -> str:
        return self.value.capitalize()


# Checking order: every row, then every column, then every region
GROUP_ORDER: tuple[GroupKind, ...] = (GroupKind.ROW, GroupKind.COLUMN, GroupKind.REGION)


class MalformedPuzzleError(ValueError):
    """Raised when a grid is not a 9×9 grid of integers."""


class GroupInvalid(BaseModel):
    """The first group found to contain a repeated value."""

    kind: GroupKind
    index: int = Field(ge=0, le=GRID_SIZE - 1)

    model_config = {"frozen": True}

    def describe(self) -> str:
        return f"{self.kind.label} {self.index} is invalid"


class HighlightState(BaseModel):
    """The group currently under inspection. Absence (None) means nothing is highlighted."""

    kind: GroupKind
    index: int = Field(ge=0, le=GRID_SIZE - 1)

    model_config = {"frozen": True}


class OutcomeStatus(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    CANCELLED = "cancelled"


class RunOutcome(BaseModel):
    """Terminal result of one run."""

    status: OutcomeStatus
    error: Optional[GroupInvalid] = None

    model_config = {"frozen": True}

    @classmethod
    def valid(cls) -> "RunOutcome":
        return cls(status=OutcomeStatus.VALID)

    @classmethod
    def invalid(cls, kind: GroupKind, index: int) -> "RunOutcome":
        return cls(status=OutcomeStatus.INVALID, error=GroupInvalid(kind=kind, index=index))

    @classmethod
    def cancelled(cls) -> "RunOutcome":
        return cls(status=OutcomeStatus.CANCELLED)

    @property
    def is_terminal_result(self) -> bool:
        """True for Valid/Invalid, the outcomes that settle a board."""
        return self.status != OutcomeStatus.CANCELLED


class RunState(BaseModel):
    """Consolidated, externally observable state of a board's current run.

    Replaced wholesale when a new run starts and updated field by field as
    the live run emits events.
    """

    run_id: Optional[str] = None
    puzzle: Optional[list[list[int]]] = None
    puzzle_index: Optional[int] = None
    highlight: Optional[HighlightState] = None
    error: Optional[GroupInvalid] = None
    loading: bool = False
    outcome: Optional[OutcomeStatus] = None


def as_puzzle(grid: Sequence[Sequence[int]]) -> Puzzle:
    """Normalise a grid into an immutable Puzzle, failing fast on a bad shape."""
    try:
        rows = [tuple(row) for row in grid]
    except TypeError as e:
        raise MalformedPuzzleError(f"Puzzle must be a sequence of rows: {e}") from e

    if len(rows) != GRID_SIZE:
        raise MalformedPuzzleError(f"Puzzle must have {GRID_SIZE} rows, got {len(rows)}")

    for i, row in enumerate(rows):
        if len(row) != GRID_SIZE:
            raise MalformedPuzzleError(
                f"Row {i} must have {GRID_SIZE} cells, got {len(row)}"
            )
        for j, cell in enumerate(row):
            # bool is an int subclass but never a puzzle value
            if isinstance(cell, bool) or not isinstance(cell, int):
                raise MalformedPuzzleError(
                    f"Cell ({i}, {j}) must be an integer, got {cell!r}"
                )

    return tuple(rows)
