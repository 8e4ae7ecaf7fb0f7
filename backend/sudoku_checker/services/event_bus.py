"""Event bus — internal pub/sub for broadcasting run events to connected clients."""

from typing import Awaitable, Callable, Dict, Optional, Set
from collections import defaultdict

import structlog

from sudoku_checker.config import get_settings

logger = structlog.get_logger()

# Type alias for event listeners
EventListener = Callable[[dict], Awaitable[None]]


class EventBus:
    """In-memory pub/sub for routing board events to WebSocket connections.

    Each board_id can have multiple listeners (multiple browser tabs, etc.).
    Each publish awaits every listener before returning, so every listener
    sees a board's events in the order they were published. A listener that
    raises is removed.
    """

    def __init__(self, max_history: Optional[int] = None):
        self._listeners: Dict[str, Set[EventListener]] = defaultdict(set)
        self._event_history: Dict[str, list] = defaultdict(list)
        self._max_history = get_settings().EVENT_HISTORY_LIMIT if max_history is None else max_history

    def subscribe(self, board_id: str, listener: EventListener) -> None:
        """Subscribe a listener to events for a board."""
        self._listeners[board_id].add(listener)
        logger.debug("event_bus_subscribe", board_id=board_id, total_listeners=len(self._listeners[board_id]))

    def unsubscribe(self, board_id: str, listener: EventListener) -> None:
        """Unsubscribe a listener from a board."""
        listeners = self._listeners.get(board_id)
        if listeners is None:
            return
        listeners.discard(listener)
        if not listeners:
            del self._listeners[board_id]

    async def publish(self, board_id: str, event: dict) -> None:
        """Publish an event to all listeners for a board."""
        # Store in history for late joiners
        history = self._event_history[board_id]
        history.append(event)
        if len(history) > self._max_history:
            del history[:len(history) - self._max_history]

        # Broadcast over a snapshot; listeners may unsubscribe while we await them
        dead_listeners = set()
        for listener in list(self._listeners.get(board_id, set())):
            try:
                await listener(event)
            except Exception as e:
                logger.warning("event_listener_failed", board_id=board_id, error=str(e))
                dead_listeners.add(listener)

        for dead in dead_listeners:
            self.unsubscribe(board_id, dead)

    def get_history(self, board_id: str) -> list[dict]:
        """Get event history for a board (for reconnecting clients)."""
        return list(self._event_history.get(board_id, []))

    def clear_history(self, board_id: str) -> None:
        """Forget past events; called when a board starts a new run."""
        self._event_history.pop(board_id, None)

    def listener_count(self, board_id: str) -> int:
        return len(self._listeners.get(board_id, ()))

    def create_callback(self, board_id: str) -> Callable[[dict], Awaitable[None]]:
        """Create an event callback bound to one board.

        This is the bridge between a board's RunController and the WebSocket layer.

        Usage:
            callback = event_bus.create_callback(board_id)
            controller = RunController(board_id, event_callback=callback)
        """
        async def callback(event: dict) -> None:
            await self.publish(board_id, event)

        return callback

    def cleanup(self, board_id: str) -> None:
        """Clean up all resources for a board."""
        self._listeners.pop(board_id, None)
        self._event_history.pop(board_id, None)


# Module-level singleton
event_bus = EventBus()
