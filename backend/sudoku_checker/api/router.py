"""Main API router — combines all endpoint routers."""

from fastapi import APIRouter

from sudoku_checker.api.boards import router as boards_router
from sudoku_checker.api.health import router as health_router
from sudoku_checker.api.puzzles import router as puzzles_router
from sudoku_checker.api.websocket import router as websocket_router

api_router = APIRouter()

# Health check
api_router.include_router(health_router, tags=["Health"])

# Sample catalogue
api_router.include_router(puzzles_router, tags=["Puzzles"])

# Boards and runs
api_router.include_router(boards_router, tags=["Boards"])

# WebSocket is exported separately, mounted at app root (no /api/v1 prefix)
ws_router = websocket_router
