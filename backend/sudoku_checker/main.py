"""Visual Sudoku Checker — paced, cancellable validation of 9×9 grids.

Main FastAPI application with lifespan management, CORS, and global error handling.
"""

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sudoku_checker import __version__
from sudoku_checker.config import get_settings
from sudoku_checker.api.router import api_router, ws_router
from sudoku_checker.services.board_manager import BoardManager

# Configure structured logging
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer() if get_settings().DEBUG else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.getLevelName(get_settings().LOG_LEVEL.upper())
    ),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    settings = get_settings()

    # ── Startup ──
    logger.info("app_starting", debug=settings.DEBUG, step_delay_seconds=settings.STEP_DELAY_SECONDS)

    app.state.boards = BoardManager()

    logger.info("app_started")

    yield

    # ── Shutdown ──
    logger.info("app_shutting_down")

    # Every live run goes quiet within one step delay
    await app.state.boards.close()

    logger.info("app_stopped")


# ── Create Application ──

app = FastAPI(
    title="Visual Sudoku Checker",
    description=(
        "Select a sudoku and watch its rows, columns and regions "
        "being checked one at a time. Selecting another sudoku "
        "supersedes the check in progress."
    ),
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ── Middleware ──

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Global Exception Handlers ──

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all error handler for unhandled exceptions."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again.",
        },
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle malformed puzzles and other bad input."""
    return JSONResponse(
        status_code=422,
        content={"error": "validation_error", "message": str(exc)},
    )


# ── Routes ──

app.include_router(api_router, prefix="/api/v1")
app.include_router(ws_router)  # WebSocket at /ws/boards/{id} (no versioned prefix)


# ── Root endpoint ──

@app.get("/")
async def root():
    """Root endpoint — API info."""
    return {
        "name": "Visual Sudoku Checker",
        "version": __version__,
        "description": "Paced, cancellable validation of 9×9 sudoku grids",
        "docs": "/docs",
        "health": "/api/v1/health",
        "puzzles": "/api/v1/puzzles",
    }
