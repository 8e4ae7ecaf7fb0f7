"""Boards API — create boards, select puzzles, read run state."""

from fastapi import APIRouter, HTTPException, Request

import structlog

from sudoku_checker.models.requests import SelectPuzzleRequest
from sudoku_checker.models.responses import (
    BoardStateResponse,
    CreateBoardResponse,
    SelectPuzzleResponse,
)
from sudoku_checker.services.board_manager import (
    BoardLimitExceededError,
    BoardManager,
    BoardNotFoundError,
)
from sudoku_checker.services.catalog import UnknownPuzzleError, resolve_grid
from sudoku_checker.services.readout import describe
from sudoku_checker.services.run_controller import RunController

logger = structlog.get_logger()

router = APIRouter()


def _websocket_url(board_id: str) -> str:
    return f"/ws/boards/{board_id}"


def _boards(request: Request) -> BoardManager:
    return request.app.state.boards


def _get_board(request: Request, board_id: str) -> RunController:
    try:
        return _boards(request).get(board_id)
    except BoardNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _state_response(controller: RunController) -> BoardStateResponse:
    state = controller.state
    return BoardStateResponse(
        board_id=controller.board_id,
        state=state,
        readout=describe(state),
        running=controller.is_running,
    )


# ─── Endpoints ───


@router.post("/boards", status_code=201, response_model=CreateBoardResponse)
async def create_board(request: Request):
    """Create an idle board. Connect to its WebSocket, then select a puzzle."""
    try:
        controller = _boards(request).create()
    except BoardLimitExceededError as e:
        raise HTTPException(
            status_code=429,
            detail={"error": "Board limit exceeded", "message": str(e)},
        )

    return CreateBoardResponse(
        board_id=controller.board_id,
        websocket_url=_websocket_url(controller.board_id),
        state=controller.state,
    )


@router.get("/boards", response_model=list[BoardStateResponse])
async def list_boards(request: Request):
    """List every board with its current state."""
    return [_state_response(c) for c in _boards(request).list_boards()]


@router.get("/boards/{board_id}", response_model=BoardStateResponse)
async def get_board(board_id: str, request: Request):
    """Get a board's run state and read-out."""
    return _state_response(_get_board(request, board_id))


@router.post("/boards/{board_id}/select", status_code=202, response_model=SelectPuzzleResponse)
async def select_puzzle(board_id: str, request_body: SelectPuzzleRequest, request: Request):
    """Start checking a puzzle, superseding the board's current run.

    Progress streams over the board's WebSocket; poll ``GET /boards/{id}`` otherwise.
    """
    _get_board(request, board_id)

    try:
        grid = resolve_grid(request_body.puzzle_index, request_body.puzzle)
    except UnknownPuzzleError as e:
        raise HTTPException(status_code=404, detail=str(e))

    # MalformedPuzzleError is a ValueError: the app-level handler answers 422
    run_id = await _boards(request).select(board_id, grid, puzzle_index=request_body.puzzle_index)

    logger.info(
        "puzzle_selected",
        board_id=board_id,
        run_id=run_id,
        source="catalog" if request_body.puzzle is None else "grid",
    )

    return SelectPuzzleResponse(board_id=board_id, run_id=run_id, websocket_url=_websocket_url(board_id))


@router.delete("/boards/{board_id}")
async def delete_board(board_id: str, request: Request):
    """Stop a board's run and delete it."""
    try:
        await _boards(request).delete(board_id)
    except BoardNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"board_id": board_id, "status": "deleted"}
