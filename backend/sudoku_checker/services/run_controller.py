"""Run controller — owns a board's current run and supersedes it when a new puzzle is selected."""

import asyncio
import uuid
from typing import Awaitable, Callable, Optional, Sequence

import structlog

from sudoku_checker.models.events import (
    ErrorChangedEvent,
    HighlightChangedEvent,
    LoadingChangedEvent,
    RunCompletedEvent,
    RunStartedEvent,
)
from sudoku_checker.models.puzzle import (
    GroupInvalid,
    OutcomeStatus,
    Puzzle,
    RunOutcome,
    RunState,
    as_puzzle,
)
from sudoku_checker.services.readout import describe
from sudoku_checker.validation import CancellationToken, ValidationSequencer

logger = structlog.get_logger()

EventCallback = Optional[Callable[[dict], Awaitable[None]]]


def _generate_run_id() -> str:
    """Generate a short, readable run ID."""
    return f"run_{uuid.uuid4().hex[:8]}"


class RunController:
    """Keeps at most one live run per board.

    Every run gets its own CancellationToken and its own emit gate. The gate
    drops any event whose token has been cancelled or replaced, so nothing a
    superseded run produces reaches the board state or the event callback.
    """

    def __init__(
        self,
        board_id: str,
        event_callback: EventCallback = None,
        sequencer: Optional[ValidationSequencer] = None,
    ):
        self.board_id = board_id
        self.sequencer = sequencer or ValidationSequencer()
        self._event_callback = event_callback
        self._state = RunState()
        self._token: Optional[CancellationToken] = None
        self._task: Optional[asyncio.Task] = None
        # Strong references; the event loop only keeps weak ones
        self._tasks: set[asyncio.Task] = set()

    @property
    def state(self) -> RunState:
        """Snapshot of the current run's observable state."""
        return self._state.model_copy()

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def select(self, grid: Sequence[Sequence[int]], puzzle_index: Optional[int] = None) -> str:
        """Cancel the live run (if any) and start checking ``grid``.

        Raises:
            MalformedPuzzleError: grid is not 9×9 integers; the live run is left alone.

        Returns:
            The new run's ID
        """
        puzzle = as_puzzle(grid)

        previous_run_id = self._state.run_id
        if self._token is not None:
            self._token.cancel(reason="superseded")

        token = CancellationToken()
        run_id = _generate_run_id()
        self._token = token
        self._state = RunState(
            run_id=run_id,
            puzzle=[list(row) for row in puzzle],
            puzzle_index=puzzle_index,
            loading=True,
        )

        logger.info(
            "run_started",
            board_id=self.board_id,
            run_id=run_id,
            puzzle_index=puzzle_index,
            superseded_run_id=previous_run_id if self.is_running else None,
        )

        emit = self._gate(token)
        ids = {"board_id": self.board_id, "run_id": run_id}
        await emit(RunStartedEvent(puzzle=self._state.puzzle, puzzle_index=puzzle_index, **ids).model_dump())
        await emit(HighlightChangedEvent(**ids).model_dump())
        await emit(ErrorChangedEvent(**ids).model_dump())
        await emit(LoadingChangedEvent(loading=True, **ids).model_dump())

        # Another select may have landed while the reset events were delivered
        if token is not self._token:
            return run_id

        task = asyncio.create_task(self._execute(puzzle, token, run_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._task = task
        return run_id

    async def wait(self) -> Optional[RunOutcome]:
        """Wait for the most recently started run to finish and return its outcome."""
        if self._task is None:
            return None
        return await self._task

    async def close(self) -> None:
        """Cancel the live run and wait (at most one step delay) for every run to go quiet."""
        if self._token is not None:
            self._token.cancel(reason="closed")
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    # ── Internals ──

    def _gate(self, token: CancellationToken) -> Callable[[dict], Awaitable[None]]:
        """Build the emit function for one run: apply to state, then publish."""
        async def emit(event: dict) -> None:
            if token.is_cancelled or token is not self._token:
                return
            self._apply(event)
            if self._event_callback is not None:
                await self._event_callback(event)

        return emit

    def _apply(self, event: dict) -> None:
        """Fold one event into the board state as a single replacement."""
        event_type = event.get("type")
        if event_type == "highlight_changed":
            update = {"highlight": HighlightChangedEvent(**event).to_state()}
        elif event_type == "error_changed":
            error = event.get("error")
            update = {"error": GroupInvalid(**error) if error else None}
        elif event_type == "loading_changed":
            update = {"loading": event["loading"]}
        elif event_type == "run_completed":
            update = {"outcome": OutcomeStatus(event["outcome"])}
        else:
            return
        self._state = self._state.model_copy(update=update)

    async def _execute(self, puzzle: Puzzle, token: CancellationToken, run_id: str) -> RunOutcome:
        emit = self._gate(token)
        ids = {"board_id": self.board_id, "run_id": run_id}

        try:
            outcome = await self.sequencer.run(
                puzzle, token, event_callback=emit, board_id=self.board_id, run_id=run_id,
            )
        except Exception as e:
            logger.error("run_failed", error=str(e), error_type=type(e).__name__, **ids)
            await emit(LoadingChangedEvent(loading=False, **ids).model_dump())
            raise

        if not outcome.is_terminal_result or token.is_cancelled:
            return self._cancelled(token, ids)

        # An invalid run stops with its failing group still highlighted
        if self._state.highlight is not None:
            await emit(HighlightChangedEvent(**ids).model_dump())
        await emit(LoadingChangedEvent(loading=False, **ids).model_dump())

        # Superseded while the closing events were being delivered
        if token.is_cancelled:
            return self._cancelled(token, ids)

        readout = describe(RunState(run_id=run_id, error=outcome.error))
        await emit(
            RunCompletedEvent(outcome=outcome.status, error=outcome.error, readout=readout, **ids).model_dump()
        )

        logger.info(
            "run_completed",
            outcome=outcome.status.value,
            error=outcome.error.describe() if outcome.error else None,
            **ids,
        )
        return outcome

    @staticmethod
    def _cancelled(token: CancellationToken, ids: dict) -> RunOutcome:
        # The next run owns loading/highlight/error now
        logger.info("run_cancelled", reason=token.reason, **ids)
        return RunOutcome.cancelled()
