"""Board manager — in-memory registry of boards, one RunController each."""

import uuid
from typing import Optional, Sequence

import structlog

from sudoku_checker.config import get_settings
from sudoku_checker.services.event_bus import EventBus, event_bus as default_event_bus
from sudoku_checker.services.run_controller import RunController
from sudoku_checker.validation import ValidationSequencer

logger = structlog.get_logger()


class BoardNotFoundError(LookupError):
    """Raised when a board ID is not registered."""


class BoardLimitExceededError(RuntimeError):
    """Raised when creating a board would exceed MAX_BOARDS."""


def _generate_board_id() -> str:
    """Generate a short, readable board ID."""
    return f"board_{uuid.uuid4().hex[:8]}"


class BoardManager:
    """Creates, looks up and tears down boards.

    Runs are never persisted; a board and its state live as long as the process.
    """

    def __init__(
        self,
        bus: Optional[EventBus] = None,
        step_delay: Optional[float] = None,
        max_boards: Optional[int] = None,
    ):
        settings = get_settings()
        self.bus = bus or default_event_bus
        self.step_delay = settings.STEP_DELAY_SECONDS if step_delay is None else step_delay
        self.max_boards = settings.MAX_BOARDS if max_boards is None else max_boards
        self._boards: dict[str, RunController] = {}

    def __len__(self) -> int:
        return len(self._boards)

    def create(self) -> RunController:
        """Register a new, idle board."""
        if len(self._boards) >= self.max_boards:
            raise BoardLimitExceededError(f"Maximum of {self.max_boards} boards reached")

        board_id = _generate_board_id()
        controller = RunController(
            board_id,
            event_callback=self._board_callback(board_id),
            sequencer=ValidationSequencer(step_delay=self.step_delay),
        )
        self._boards[board_id] = controller
        logger.info("board_created", board_id=board_id, total_boards=len(self._boards))
        return controller

    def get(self, board_id: str) -> RunController:
        controller = self._boards.get(board_id)
        if controller is None:
            raise BoardNotFoundError(f"Board {board_id} not found")
        return controller

    def exists(self, board_id: str) -> bool:
        return board_id in self._boards

    def list_boards(self) -> list[RunController]:
        return list(self._boards.values())

    async def select(
        self,
        board_id: str,
        grid: Sequence[Sequence[int]],
        puzzle_index: Optional[int] = None,
    ) -> str:
        """Start a run on a board, superseding its current one."""
        controller = self.get(board_id)
        run_id = await controller.select(grid, puzzle_index=puzzle_index)
        return run_id

    async def delete(self, board_id: str) -> None:
        """Stop a board's run and forget it."""
        controller = self._boards.pop(board_id, None)
        if controller is None:
            raise BoardNotFoundError(f"Board {board_id} not found")
        await controller.close()
        self.bus.cleanup(board_id)
        logger.info("board_deleted", board_id=board_id)

    async def close(self) -> None:
        """Close every board; used at application shutdown."""
        for board_id in list(self._boards):
            await self.delete(board_id)

    def _board_callback(self, board_id: str):
        """Publish a board's events, restarting its history whenever a new run starts."""
        publish = self.bus.create_callback(board_id)

        async def callback(event: dict) -> None:
            if event.get("type") == "run_started":
                self.bus.clear_history(board_id)
            await publish(event)

        return callback
