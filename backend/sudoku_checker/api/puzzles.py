"""Puzzles API — the sample catalogue shown in the picker list."""

from fastapi import APIRouter, HTTPException

from sudoku_checker.models.responses import PuzzleDetail, PuzzleSummary
from sudoku_checker.services.catalog import UnknownPuzzleError, get_puzzle, list_puzzles

router = APIRouter()


@router.get("/puzzles", response_model=list[PuzzleSummary])
async def list_sample_puzzles():
    """List sample puzzles with their display label and known-valid flag."""
    return [
        PuzzleSummary(index=i, name=p.name, label=p.label, valid=p.valid)
        for i, p in enumerate(list_puzzles())
    ]


@router.get("/puzzles/{index}", response_model=PuzzleDetail)
async def get_sample_puzzle(index: int):
    """Get one sample puzzle with its grid."""
    try:
        puzzle = get_puzzle(index)
    except UnknownPuzzleError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return PuzzleDetail(index=index, name=puzzle.name, label=puzzle.label, valid=puzzle.valid, grid=puzzle.grid)
