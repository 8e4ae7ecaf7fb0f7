"""One-line, human-readable summary of a board's run state."""

from sudoku_checker.models.puzzle import RunState

LOADING_TEXT = "Checking..."
VALID_TEXT = "The sudoku is valid"
IDLE_TEXT = "Select a sudoku to check"


def describe(state: RunState) -> str:
    """Render the read-out for a run state.

    Loading wins over everything else, then an error, then success. A board
    that has never run anything reports that it is idle.
    """
    if state.loading:
        return LOADING_TEXT
    if state.error is not None:
        return state.error.describe()
    if state.run_id is None:
        return IDLE_TEXT
    return VALID_TEXT
