"""Validation Sequencer — walks every group of a puzzle one at a time, observably.

Rows are checked before columns, columns before regions, indices ascending.
Each group is highlighted, the sequencer pauses, and then the group is
checked. The first invalid group ends the run; nothing after it is inspected.

Usage:
    sequencer = ValidationSequencer(step_delay=0.25)
    outcome = await sequencer.run(puzzle, token, event_callback=callback)
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional

import structlog

from sudoku_checker.config import get_settings
from sudoku_checker.models.events import ErrorChangedEvent, HighlightChangedEvent
from sudoku_checker.models.puzzle import (
    GROUP_ORDER,
    GroupInvalid,
    GroupKind,
    HighlightState,
    Puzzle,
    RunOutcome,
)
from sudoku_checker.validation.cancellation import CancellationToken
from sudoku_checker.validation.groups import groups, is_valid

logger = structlog.get_logger()

EventCallback = Optional[Callable[[dict], Awaitable[None]]]
Sleep = Callable[[float], Awaitable[None]]


class ValidationSequencer:
    """Paced, cancellable walk over rows, columns and regions.

    Contract:
        - run() returns exactly one RunOutcome and never raises for an invalid group
        - the token is checked before every emission and after the last one; once
          a cancelled token is observed the run returns Cancelled without emitting
          anything else
        - the pause is never interrupted, so a cancelled run may stay suspended
          for at most one step delay before returning
    """

    def __init__(self, step_delay: Optional[float] = None, sleep: Sleep = asyncio.sleep):
        """
        Args:
            step_delay: Pause after each highlight, in seconds. Defaults to settings.
            sleep: Awaitable delay, injectable for tests.
        """
        if step_delay is None:
            step_delay = get_settings().STEP_DELAY_SECONDS
        self.step_delay = step_delay
        self._sleep = sleep

    async def run(
        self,
        puzzle: Puzzle,
        token: CancellationToken,
        event_callback: EventCallback = None,
        board_id: str = "",
        run_id: str = "",
    ) -> RunOutcome:
        """Check every group of the puzzle in order.

        Args:
            puzzle: Well-formed puzzle (see ``as_puzzle``)
            token: This run's cancellation token
            event_callback: Receives highlight/error events as JSON-safe dicts
            board_id: Stamped on every event
            run_id: Stamped on every event

        Returns:
            RunOutcome: Valid, Invalid(kind, index) or Cancelled
        """
        start_time = time.perf_counter()
        log = logger.bind(board_id=board_id, run_id=run_id)

        async def emit(event: dict) -> None:
            if event_callback is not None:
                await event_callback(event)

        async def highlight(state: Optional[HighlightState]) -> None:
            await emit(
                HighlightChangedEvent.from_state(state, board_id=board_id, run_id=run_id).model_dump()
            )

        for kind in GROUP_ORDER:
            kind_groups = groups(puzzle, kind)

            for index, group in enumerate(kind_groups):
                if token.is_cancelled:
                    return self._cancelled(log, kind, index)

                await highlight(HighlightState(kind=kind, index=index))
                await self._sleep(self.step_delay)

                # The pause may have outlived this run
                if token.is_cancelled:
                    return self._cancelled(log, kind, index)

                if not is_valid(group):
                    error = GroupInvalid(kind=kind, index=index)
                    await emit(
                        ErrorChangedEvent(error=error, board_id=board_id, run_id=run_id).model_dump()
                    )
                    if token.is_cancelled:
                        return self._cancelled(log, kind, index)
                    log.info(
                        "group_invalid",
                        kind=kind.value,
                        index=index,
                        duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                    )
                    return RunOutcome.invalid(kind, index)

                log.debug("group_checked", kind=kind.value, index=index)

            await highlight(None)

        # Cancelled while the last region was being cleared
        if token.is_cancelled:
            return self._cancelled(log, GROUP_ORDER[-1], len(kind_groups) - 1)

        log.info(
            "sequence_valid",
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return RunOutcome.valid()

    @staticmethod
    def _cancelled(log, kind: GroupKind, index: int) -> RunOutcome:
        log.info("sequence_cancelled", kind=kind.value, index=index)
        return RunOutcome.cancelled()
