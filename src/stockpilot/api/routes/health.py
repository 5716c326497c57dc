"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from stockpilot import __version__
from stockpilot.api.dependencies import get_llm, get_store
from stockpilot.application.dto.responses import HealthResponse, ProviderHealthResponse
from stockpilot.config import get_settings
from stockpilot.core.exceptions import StockPilotError

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


def _uptime() -> float:
    return time.time() - _start_time


async def _storage_status() -> ProviderHealthResponse:
    name = get_settings().storage.backend
    start = time.perf_counter()
    try:
        await get_store().load_warehouses()
    except StockPilotError as e:
        return ProviderHealthResponse(name=name, available=False, error=e.message)
    return ProviderHealthResponse(
        name=name,
        available=True,
        latency_ms=(time.perf_counter() - start) * 1000,
    )


async def _llm_status() -> ProviderHealthResponse:
    try:
        llm = get_llm()
    except ValueError as e:
        return ProviderHealthResponse(name="unknown", available=False, error=str(e))

    result = await llm.check_health()
    return ProviderHealthResponse(
        name=result.provider,
        available=result.available,
        latency_ms=result.response_time_ms,
        error=result.error,
    )


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy", version=__version__, uptime_seconds=_uptime()
    )


@router.get("/storage", response_model=HealthResponse)
async def storage_health() -> HealthResponse:
    """Check that the inventory store can be read."""
    storage = await _storage_status()
    return HealthResponse(
        status="healthy" if storage.available else "unhealthy",
        version=__version__,
        uptime_seconds=_uptime(),
        storage=storage,
    )


@router.get("/llm", response_model=HealthResponse)
async def llm_health() -> HealthResponse:
    """
    LLM provider health check.

    The advisor is optional, so an unreachable model only degrades the service.
    """
    llm = await _llm_status()
    return HealthResponse(
        status="healthy" if llm.available else "degraded",
        version=__version__,
        uptime_seconds=_uptime(),
        llm=llm,
    )


@router.get("/full", response_model=HealthResponse)
async def full_health_check() -> HealthResponse:
    """Storage and LLM checks together."""
    storage = await _storage_status()
    llm = await _llm_status()

    if not storage.available:
        status_str = "unhealthy"
    elif not llm.available:
        status_str = "degraded"
    else:
        status_str = "healthy"

    return HealthResponse(
        status=status_str,
        version=__version__,
        uptime_seconds=_uptime(),
        storage=storage,
        llm=llm,
    )
