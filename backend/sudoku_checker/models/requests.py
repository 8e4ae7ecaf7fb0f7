"""API request models."""

from pydantic import BaseModel, Field, StrictInt, model_validator
from typing import Optional


class SelectPuzzleRequest(BaseModel):
    """Select the puzzle a board should check: a catalogue index or an explicit grid.

    The grid's 9×9 shape is checked by the board itself so malformed grids are
    reported the same way from every entry point.
    """

    puzzle_index: Optional[int] = Field(default=None, ge=0, description="Index into the sample catalogue")
    puzzle: Optional[list[list[StrictInt]]] = Field(
        default=None,
        description="Explicit 9×9 grid, row-major",
        examples=[[
            [1, 2, 3, 4, 5, 6, 7, 8, 9],
            [4, 5, 6, 7, 8, 9, 1, 2, 3],
            [7, 8, 9, 1, 2, 3, 4, 5, 6],
            [2, 3, 4, 5, 6, 7, 8, 9, 1],
            [5, 6, 7, 8, 9, 1, 2, 3, 4],
            [8, 9, 1, 2, 3, 4, 5, 6, 7],
            [3, 4, 5, 6, 7, 8, 9, 1, 2],
            [6, 7, 8, 9, 1, 2, 3, 4, 5],
            [9, 1, 2, 3, 4, 5, 6, 7, 8],
        ]],
    )

    @model_validator(mode="after")
    def _exactly_one_source(self) -> "SelectPuzzleRequest":
        if (self.puzzle_index is None) == (self.puzzle is None):
            raise ValueError("Provide exactly one of 'puzzle_index' or 'puzzle'")
        return self
