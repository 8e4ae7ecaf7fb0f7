# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Add backend/ to sys.path so "sudoku_checker" imports without an install
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


SOLVED = [
    [1, 2, 3, 4, 5, 6, 7, 8, 9],
    [4, 5, 6, 7, 8, 9, 1, 2, 3],
    [7, 8, 9, 1, 2, 3, 4, 5, 6],
    [2, 3, 4, 5, 6, 7, 8, 9, 1],
    [5, 6, 7, 8, 9, 1, 2, 3, 4],
    [8, 9, 1, 2, 3, 4, 5, 6, 7],
    [3, 4, 5, 6, 7, 8, 9, 1, 2],
    [6, 7, 8, 9, 1, 2, 3, 4, 5],
    [9, 1, 2, 3, 4, 5, 6, 7, 8],
]

# Rows and columns are fine, every region repeats values
LATIN_SQUARE = [[(r + c) % 9 + 1 for c in range(9)] for r in range(9)]


def with_cell(grid, row, col, value):
    """Copy of grid with one cell replaced."""
    copy = [list(r) for r in grid]
    copy[row][col] = value
    return copy


def swapped(grid, row, col_a, col_b):
    """Copy of grid with two cells of one row swapped (row stays valid)."""
    copy = [list(r) for r in grid]
    copy[row][col_a], copy[row][col_b] = copy[row][col_b], copy[row][col_a]
    return copy


class EventRecorder:
    """Async event callback that keeps everything it receives, in order."""

    def __init__(self):
        self.events: list[dict] = []

    async def __call__(self, event: dict) -> None:
        self.events.append(event)

    def of_type(self, event_type: str) -> list[dict]:
        return [e for e in self.events if e["type"] == event_type]

    def highlights(self) -> list[tuple]:
        return [(e["kind"], e["index"]) for e in self.of_type("highlight_changed")]

    def for_run(self, run_id: str) -> list[dict]:
        return [e for e in self.events if e["run_id"] == run_id]


@pytest.fixture
def solved():
    return [list(r) for r in SOLVED]


@pytest.fixture
def recorder():
    return EventRecorder()
