"""Health check endpoint."""

import time
from fastapi import APIRouter, Request

from sudoku_checker.models.responses import HealthResponse, HealthDependency
from sudoku_checker.services.catalog import list_puzzles
from sudoku_checker.validation import find_first_invalid

router = APIRouter()

_start_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """System health check with a catalogue self-test."""
    dependencies = {}

    # Every sample's display flag must agree with an unpaced check
    try:
        start = time.time()
        mismatched = [
            p.name for p in list_puzzles()
            if (find_first_invalid(p.as_puzzle()) is None) != p.valid
        ]
        latency = (time.time() - start) * 1000
        if mismatched:
            dependencies["catalog"] = HealthDependency(
                status="degraded",
                latency_ms=round(latency, 2),
                message=f"Valid flag disagrees with check: {', '.join(mismatched)}",
            )
        else:
            dependencies["catalog"] = HealthDependency(status="healthy", latency_ms=round(latency, 2))
    except Exception as e:
        dependencies["catalog"] = HealthDependency(status="unhealthy", message=str(e))

    # Overall status
    all_healthy = all(d.status == "healthy" for d in dependencies.values())
    any_unhealthy = any(d.status == "unhealthy" for d in dependencies.values())

    if all_healthy:
        status = "healthy"
    elif any_unhealthy:
        status = "unhealthy"
    else:
        status = "degraded"

    return HealthResponse(
        status=status,
        uptime_seconds=round(time.time() - _start_time, 2),
        boards=len(request.app.state.boards),
        dependencies=dependencies,
    )
