"""Board event models for real-time run streaming."""

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel

from sudoku_checker.models.puzzle import GroupInvalid, GroupKind, HighlightState, OutcomeStatus


class BaseEvent(BaseModel):
    """Base event model for all board events."""

    type: str
    board_id: str = ""
    run_id: str = ""
    timestamp: Optional[datetime] = None

    def model_post_init(self, __context):
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc)

    def model_dump(self, **kwargs):
        """Override to always serialize datetimes and enums as JSON-safe values."""
        kwargs.setdefault("mode", "json")
        return super().model_dump(**kwargs)


class RunStartedEvent(BaseEvent):
    """Emitted when a board starts checking a newly selected puzzle."""

    type: Literal["run_started"] = "run_started"
    puzzle: list[list[int]]
    puzzle_index: Optional[int] = None


class HighlightChangedEvent(BaseEvent):
    """Emitted when the group under inspection changes. Null kind/index clears it."""

    type: Literal["highlight_changed"] = "highlight_changed"
    kind: Optional[GroupKind] = None
    index: Optional[int] = None

    @classmethod
    def from_state(cls, highlight: Optional[HighlightState], **kwargs) -> "HighlightChangedEvent":
        if highlight is None:
            return cls(**kwargs)
        return cls(kind=highlight.kind, index=highlight.index, **kwargs)

    def to_state(self) -> Optional[HighlightState]:
        if self.kind is None or self.index is None:
            return None
        return HighlightState(kind=self.kind, index=self.index)


class ErrorChangedEvent(BaseEvent):
    """Emitted when the reported error is set (first invalid group) or reset."""

    type: Literal["error_changed"] = "error_changed"
    error: Optional[GroupInvalid] = None


class LoadingChangedEvent(BaseEvent):
    """Emitted when a run starts (true) or settles as valid/invalid (false)."""

    type: Literal["loading_changed"] = "loading_changed"
    loading: bool


class RunCompletedEvent(BaseEvent):
    """Emitted once when a run reaches Valid or Invalid. Cancelled runs never emit it."""

    type: Literal["run_completed"] = "run_completed"
    outcome: Literal[OutcomeStatus.VALID, OutcomeStatus.INVALID]
    error: Optional[GroupInvalid] = None
    readout: str
