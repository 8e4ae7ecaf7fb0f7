"""Puzzle validation — region table, group extraction and the paced validation sequencer.

Usage:
    from sudoku_checker.validation import ValidationSequencer, CancellationToken

    outcome = await ValidationSequencer().run(as_puzzle(grid), CancellationToken(), callback)
"""

from sudoku_checker.validation.cancellation import CancellationToken
from sudoku_checker.validation.groups import find_first_invalid, groups, is_valid
from sudoku_checker.validation.regions import build_region_table, get_region_table
from sudoku_checker.validation.sequencer import ValidationSequencer

__all__ = [
    "CancellationToken",
    "find_first_invalid",
    "groups",
    "is_valid",
    "build_region_table",
    "get_region_table",
    "ValidationSequencer",
]
