"""Sample puzzle catalogue — the static list boards select from.

The ``valid`` flag is precomputed for list display only; runs never consult it.
"""

from typing import Optional

from pydantic import BaseModel

from sudoku_checker.models.puzzle import Puzzle, as_puzzle


class UnknownPuzzleError(LookupError):
    """Raised when a catalogue index does not exist."""


class SamplePuzzle(BaseModel):
    """One catalogue entry."""

    name: str
    valid: bool
    grid: list[list[int]]

    @property
    def label(self) -> str:
        """First row digits, as shown in the picker list."""
        return "".join(str(cell) for cell in self.grid[0])

    def as_puzzle(self) -> Puzzle:
        return as_puzzle(self.grid)


# ─── Samples ───

SAMPLE_PUZZLES: list[SamplePuzzle] = [
    SamplePuzzle(
        name="Shifted sequence",
        valid=True,
        grid=[
            [1, 2, 3, 4, 5, 6, 7, 8, 9],
            [4, 5, 6, 7, 8, 9, 1, 2, 3],
            [7, 8, 9, 1, 2, 3, 4, 5, 6],
            [2, 3, 4, 5, 6, 7, 8, 9, 1],
            [5, 6, 7, 8, 9, 1, 2, 3, 4],
            [8, 9, 1, 2, 3, 4, 5, 6, 7],
            [3, 4, 5, 6, 7, 8, 9, 1, 2],
            [6, 7, 8, 9, 1, 2, 3, 4, 5],
            [9, 1, 2, 3, 4, 5, 6, 7, 8],
        ],
    ),
    SamplePuzzle(
        name="Classic solution",
        valid=True,
        grid=[
            [5, 3, 4, 6, 7, 8, 9, 1, 2],
            [6, 7, 2, 1, 9, 5, 3, 4, 8],
            [1, 9, 8, 3, 4, 2, 5, 6, 7],
            [8, 5, 9, 7, 6, 1, 4, 2, 3],
            [4, 2, 6, 8, 5, 3, 7, 9, 1],
            [7, 1, 3, 9, 2, 4, 8, 5, 6],
            [9, 6, 1, 5, 3, 7, 2, 8, 4],
            [2, 8, 7, 4, 1, 9, 6, 3, 5],
            [3, 4, 5, 2, 8, 6, 1, 7, 9],
        ],
    ),
    SamplePuzzle(
        name="Repeated digit in first row",
        valid=False,
        grid=[
            [9, 2, 3, 4, 5, 6, 7, 8, 9],
            [4, 5, 6, 7, 8, 9, 1, 2, 3],
            [7, 8, 9, 1, 2, 3, 4, 5, 6],
            [2, 3, 4, 5, 6, 7, 8, 9, 1],
            [5, 6, 7, 8, 9, 1, 2, 3, 4],
            [8, 9, 1, 2, 3, 4, 5, 6, 7],
            [3, 4, 5, 6, 7, 8, 9, 1, 2],
            [6, 7, 8, 9, 1, 2, 3, 4, 5],
            [9, 1, 2, 3, 4, 5, 6, 7, 8],
        ],
    ),
    SamplePuzzle(
        name="Swapped cells break a column",
        valid=False,
        grid=[
            [2, 1, 3, 4, 5, 6, 7, 8, 9],
            [4, 5, 6, 7, 8, 9, 1, 2, 3],
            [7, 8, 9, 1, 2, 3, 4, 5, 6],
            [2, 3, 4, 5, 6, 7, 8, 9, 1],
            [5, 6, 7, 8, 9, 1, 2, 3, 4],
            [8, 9, 1, 2, 3, 4, 5, 6, 7],
            [3, 4, 5, 6, 7, 8, 9, 1, 2],
            [6, 7, 8, 9, 1, 2, 3, 4, 5],
            [9, 1, 2, 3, 4, 5, 6, 7, 8],
        ],
    ),
    SamplePuzzle(
        name="Latin square",
        valid=False,
        grid=[
            [1, 2, 3, 4, 5, 6, 7, 8, 9],
            [2, 3, 4, 5, 6, 7, 8, 9, 1],
            [3, 4, 5, 6, 7, 8, 9, 1, 2],
            [4, 5, 6, 7, 8, 9, 1, 2, 3],
            [5, 6, 7, 8, 9, 1, 2, 3, 4],
            [6, 7, 8, 9, 1, 2, 3, 4, 5],
            [7, 8, 9, 1, 2, 3, 4, 5, 6],
            [8, 9, 1, 2, 3, 4, 5, 6, 7],
            [9, 1, 2, 3, 4, 5, 6, 7, 8],
        ],
    ),
]


def list_puzzles() -> list[SamplePuzzle]:
    return list(SAMPLE_PUZZLES)


def get_puzzle(index: int) -> SamplePuzzle:
    """Look up a sample by its position in the catalogue."""
    if not 0 <= index < len(SAMPLE_PUZZLES):
        raise UnknownPuzzleError(f"Puzzle {index} not found")
    return SAMPLE_PUZZLES[index]


def resolve_grid(puzzle_index: Optional[int] = None, puzzle: Optional[list[list[int]]] = None) -> list[list[int]]:
    """Pick the grid a select command refers to: an explicit grid, else a catalogue entry."""
    if puzzle is not None:
        return puzzle
    if puzzle_index is None:
        raise ValueError("Provide either 'puzzle_index' or 'puzzle'")
    return get_puzzle(puzzle_index).grid
