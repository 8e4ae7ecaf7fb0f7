"""API response models."""

from pydantic import BaseModel
from typing import Optional, Literal

from sudoku_checker.models.puzzle import RunState


class PuzzleSummary(BaseModel):
    """One entry of the puzzle picker list."""

    index: int
    name: str
    label: str
    valid: bool


class PuzzleDetail(PuzzleSummary):
    """A catalogue puzzle with its grid."""

    grid: list[list[int]]


class CreateBoardResponse(BaseModel):
    """Response after creating a new board."""

    board_id: str
    websocket_url: str
    state: RunState


class BoardStateResponse(BaseModel):
    """A board's current run state and its read-out."""

    board_id: str
    state: RunState
    readout: str
    running: bool


class SelectPuzzleResponse(BaseModel):
    """Response after a board starts checking a puzzle."""

    board_id: str
    run_id: str
    websocket_url: str


class HealthDependency(BaseModel):
    """Health status of a single dependency."""

    status: Literal["healthy", "unhealthy", "degraded"]
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class HealthResponse(BaseModel):
    """System health check response."""

    status: Literal["healthy", "unhealthy", "degraded"]
    version: str = "1.0.0"
    uptime_seconds: float
    boards: int = 0
    dependencies: dict[str, HealthDependency] = {}
