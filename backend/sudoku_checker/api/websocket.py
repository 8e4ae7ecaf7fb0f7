"""WebSocket endpoint for real-time board event streaming."""

import json
from datetime import datetime
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

import structlog

from sudoku_checker.models.requests import SelectPuzzleRequest
from sudoku_checker.services.board_manager import BoardManager
from sudoku_checker.services.catalog import resolve_grid
from sudoku_checker.services.readout import describe

logger = structlog.get_logger()

router = APIRouter()

# Application close code for an unknown board
WS_CLOSE_UNKNOWN_BOARD = 4404


def _json_serial(obj):
    """JSON serializer for objects not serializable by default json code."""
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Type {type(obj)} not serializable")


async def _send_json(websocket: WebSocket, data: dict):
    """Send JSON over WebSocket with datetime handling."""
    text = json.dumps(data, default=_json_serial)
    await websocket.send_text(text)


async def _handle_select(websocket: WebSocket, boards: BoardManager, board_id: str, message: dict):
    """Run a select command; problems are reported back on the socket, not raised."""
    try:
        body = SelectPuzzleRequest(
            puzzle_index=message.get("puzzle_index"),
            puzzle=message.get("puzzle"),
        )
        grid = resolve_grid(body.puzzle_index, body.puzzle)
        run_id = await boards.select(board_id, grid, puzzle_index=body.puzzle_index)
    except ValidationError as e:
        await _send_json(websocket, {"type": "error", "message": e.errors()[0]["msg"]})
        return
    except (LookupError, ValueError) as e:
        await _send_json(websocket, {"type": "error", "message": str(e)})
        return

    logger.info("ws_select", board_id=board_id, run_id=run_id)


@router.websocket("/ws/boards/{board_id}")
async def board_websocket(websocket: WebSocket, board_id: str):
    """WebSocket connection for streaming a board's run events in real-time.

    Protocol:
        Server → Client: JSON events (run_started, highlight_changed, error_changed,
                         loading_changed, run_completed)
        Client → Server: JSON commands (select, state, ping)

    Reconnection:
        On connect, server sends the current run's events so far,
        so late joiners or reconnecting clients can replay its progress.
    """
    boards: BoardManager = websocket.app.state.boards

    await websocket.accept()
    if not boards.exists(board_id):
        await websocket.close(code=WS_CLOSE_UNKNOWN_BOARD, reason=f"Board {board_id} not found")
        return

    logger.info("ws_connected", board_id=board_id)

    # Live events are held back until the history has been sent
    pending: list[dict] = []
    replaying = True

    async def ws_listener(event: dict):
        if replaying:
            pending.append(event)
            return
        await _send_json(websocket, event)

    # Snapshot and subscribe with no await in between, so no event falls through
    history = boards.bus.get_history(board_id)
    boards.bus.subscribe(board_id, ws_listener)

    try:
        if history:
            await _send_json(websocket, {
                "type": "event_history",
                "events": history,
                "count": len(history),
            })
        while pending:
            await _send_json(websocket, pending.pop(0))
        replaying = False

        # Keep connection alive and listen for client commands
        while True:
            try:
                data = await websocket.receive_text()
                message = json.loads(data)
                if not isinstance(message, dict):
                    await _send_json(websocket, {
                        "type": "error",
                        "message": "Commands must be JSON objects",
                    })
                    continue
                msg_type = message.get("type")

                if msg_type == "select":
                    await _handle_select(websocket, boards, board_id, message)

                elif msg_type == "state":
                    if not boards.exists(board_id):
                        break
                    state = boards.get(board_id).state
                    await _send_json(websocket, {
                        "type": "state",
                        "state": state.model_dump(mode="json"),
                        "readout": describe(state),
                    })

                elif msg_type == "ping":
                    await _send_json(websocket, {"type": "pong"})

                else:
                    await _send_json(websocket, {
                        "type": "error",
                        "message": f"Unknown command: {msg_type}",
                    })

            except WebSocketDisconnect:
                break
            except json.JSONDecodeError:
                await _send_json(websocket, {
                    "type": "error",
                    "message": "Invalid JSON",
                })

    except WebSocketDisconnect:
        pass
    finally:
        boards.bus.unsubscribe(board_id, ws_listener)
        logger.info("ws_disconnected", board_id=board_id)
