from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, Path, Request
from starlette.responses import JSONResponse

from app.api.deps import get_distance_service
from app.api.errors import ERROR_RESPONSES, failure_response
from app.core.config import settings
from app.schemas.airport import Airport
from app.schemas.distance import IATA_CODE_PATTERN, DistanceRequest, DistanceResponse
from app.services.distance_service import DistanceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/distance", tags=["distance"])


@contextlib.asynccontextmanager
async def cancel_on_disconnect(request: Request) -> AsyncIterator[asyncio.Event]:
    """Yield a cancel signal that is set once the caller goes away."""
    cancel = asyncio.Event()

    async def watch() -> None:
        while not cancel.is_set():
            await asyncio.sleep(settings.disconnect_poll_interval_sec)
            if await request.is_disconnected():
                logger.info("Client disconnected from %s, cancelling lookups", request.url.path)
                cancel.set()

    watcher = asyncio.create_task(watch())
    try:
        yield cancel
    finally:
        watcher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher


@router.post("/calculate", response_model=DistanceResponse, responses=ERROR_RESPONSES)
async def calculate_distance(
    payload: DistanceRequest,
    request: Request,
    service: DistanceService = Depends(get_distance_service),
) -> DistanceResponse | JSONResponse:
    """
    Calculate the great-circle distance between two airports.

    Both airports are looked up concurrently; distances are rounded to two decimals.
    """
    logger.info("Distance requested between %s and %s", payload.from_airport, payload.to_airport)

    async with cancel_on_disconnect(request) as cancel:
        result = await service.measure(
            payload.from_airport,
            payload.to_airport,
            cancel=cancel,
            timeout=settings.distance_request_timeout_sec,
        )

    if result.failure is not None:
        return failure_response(result.failure)

    report = result.unwrap()
    return DistanceResponse(
        from_airport=report.from_airport,
        to_airport=report.to_airport,
        distance_in_miles=round(report.distance_miles, 2),
        distance_in_kilometers=round(report.distance_kilometers, 2),
        execution_time_ms=report.elapsed_ms,
    )


@router.get("/airport/{iata_code}", response_model=Airport, responses=ERROR_RESPONSES)
async def get_airport(
    request: Request,
    iata_code: str = Path(..., min_length=3, max_length=3, pattern=IATA_CODE_PATTERN),
    service: DistanceService = Depends(get_distance_service),
) -> Airport | JSONResponse:
    """Look up a single airport by IATA code."""
    async with cancel_on_disconnect(request) as cancel:
        result = await service.airport(iata_code, cancel)

    if result.failure is not None:
        return failure_response(result.failure)
    return result.unwrap()
