from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from app.schemas.airport import Airport
from app.services.airport_client import AirportLookupClient
from app.services.distance_calculation import DistanceCalculator
from app.services.outcomes import FailureKind, Result


logger = logging.getLogger(__name__)

SAME_AIRPORTS = "SAME_AIRPORTS"


@dataclass(frozen=True, slots=True)
class DistanceReport:
    from_airport: Airport
    to_airport: Airport
    distance_miles: float
    distance_kilometers: float
    elapsed_ms: int


class DistanceService:
    """Look up two airports concurrently and measure the distance between them."""

    def __init__(
        self,
        lookup_client: AirportLookupClient,
        calculator: DistanceCalculator | None = None,
    ) -> None:
        self.lookup_client = lookup_client
        self.calculator = calculator or DistanceCalculator()

    async def airport(self, iata_code: str, cancel: asyncio.Event | None = None) -> Result[Airport]:
        return await self.lookup_client.lookup(iata_code, cancel)

    async def measure(
        self,
        from_code: str,
        to_code: str,
        cancel: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> Result[DistanceReport]:
        """Measure the distance between two airports in miles and kilometers.

        Both lookups share one cancel signal; ``timeout`` sets it after the
        given number of seconds. When both lookups fail, the failure of the
        departure airport is reported.
        """
        started = time.perf_counter()

        if (from_code or "").strip().upper() == (to_code or "").strip().upper():
            logger.warning("Refusing to measure distance between identical airports %s", from_code)
            return Result.error(
                FailureKind.INVALID_INPUT,
                "Departure and arrival airports must be different",
                code=SAME_AIRPORTS,
            )

        if cancel is None:
            cancel = asyncio.Event()
        deadline = None
        if timeout is not None:
            deadline = asyncio.get_running_loop().call_later(timeout, cancel.set)

        try:
            async with asyncio.TaskGroup() as group:
                from_task = group.create_task(self.lookup_client.lookup(from_code, cancel))
                to_task = group.create_task(self.lookup_client.lookup(to_code, cancel))
        finally:
            if deadline is not None:
                deadline.cancel()

        from_result = from_task.result()
        to_result = to_task.result()
        for result in (from_result, to_result):
            if result.failure is not None:
                logger.warning(
                    "Distance between %s and %s failed: %s (%s)",
                    from_code,
                    to_code,
                    result.failure.kind,
                    result.failure.message,
                )
                return Result.from_failure(result.failure)

        from_airport = from_result.unwrap()
        to_airport = to_result.unwrap()
        miles = self.calculator.miles(from_airport, to_airport)
        kilometers = self.calculator.kilometers(from_airport, to_airport)
        elapsed_ms = int((time.perf_counter() - started) * 1000)

        logger.info(
            "Distance %s-%s: %.2f mi (%.2f km) in %d ms",
            from_airport.iata,
            to_airport.iata,
            miles,
            kilometers,
            elapsed_ms,
        )
        return Result.success(
            DistanceReport(
                from_airport=from_airport,
                to_airport=to_airport,
                distance_miles=miles,
                distance_kilometers=kilometers,
                elapsed_ms=elapsed_ms,
            )
        )


__all__ = ["DistanceReport", "DistanceService", "SAME_AIRPORTS"]
