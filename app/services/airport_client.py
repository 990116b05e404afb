from __future__ import annotations

import asyncio
import logging
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from app.core.config import settings
from app.schemas.airport import Airport
from app.services.outcomes import FailureKind, Result


logger = logging.getLogger(__name__)


class AirportLookupClient:
    """Fetch and validate airport records from the external airport directory.

    The HTTP client is owned by the caller; this class keeps no state between
    lookups and never caches.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.client = client
        self.base_url = (base_url or settings.airport_api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.airport_api_timeout_sec
        self.user_agent = user_agent or settings.airport_api_user_agent

    async def lookup(self, iata_code: str, cancel: asyncio.Event | None = None) -> Result[Airport]:
        """Return the airport for ``iata_code`` or a classified failure.

        Setting ``cancel`` aborts the outbound request and yields a CANCELLED
        failure. Cancelling the calling task aborts the request as well and
        re-raises ``CancelledError``.
        """
        code = (iata_code or "").strip().upper()
        if cancel is None:
            return await self._fetch(code)
        if cancel.is_set():
            return _cancelled(code)

        fetch = asyncio.ensure_future(self._fetch(code))
        waiter = asyncio.ensure_future(cancel.wait())
        try:
            done, _ = await asyncio.wait({fetch, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            pending = [task for task in (fetch, waiter) if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        if fetch in done:
            return fetch.result()
        logger.warning("Airport lookup for %s cancelled", code)
        return _cancelled(code)

    async def _fetch(self, code: str) -> Result[Airport]:
        logger.info("Requesting airport %s", code)
        try:
            response = await self.client.get(
                f"{self.base_url}/airports/{quote(code, safe='')}",
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            logger.warning("Airport lookup for %s timed out: %s", code, exc)
            return Result.error(
                FailureKind.CANCELLED,
                f"Airport lookup for {code} timed out",
                detail=str(exc) or None,
                code=code,
            )
        except httpx.HTTPError as exc:
            logger.warning("Airport lookup for %s failed: %s", code, exc)
            return Result.error(
                FailureKind.UPSTREAM_ERROR,
                f"Airport service unreachable for {code}",
                detail=str(exc) or exc.__class__.__name__,
                code=code,
            )
        except Exception as exc:
            logger.exception("Unexpected error while requesting airport %s", code)
            return Result.error(FailureKind.UNEXPECTED, "Unexpected error", detail=repr(exc), code=code)

        try:
            return self._handle_response(code, response)
        except Exception as exc:
            logger.exception("Unexpected error while reading airport %s", code)
            return Result.error(FailureKind.UNEXPECTED, "Unexpected error", detail=repr(exc), code=code)

    def _handle_response(self, code: str, response: httpx.Response) -> Result[Airport]:
        if response.status_code == httpx.codes.NOT_FOUND:
            logger.warning("Airport %s not found upstream", code)
            return Result.error(
                FailureKind.AIRPORT_NOT_FOUND,
                f"Airport with code {code} was not found",
                code=code,
                status_code=response.status_code,
            )
        if not response.is_success:
            logger.warning("Airport lookup for %s returned status %s", code, response.status_code)
            return Result.error(
                FailureKind.UPSTREAM_ERROR,
                f"Airport service returned status {response.status_code} for {code}",
                detail=response.reason_phrase or None,
                code=code,
                status_code=response.status_code,
            )

        if not response.text.strip():
            return _malformed(code, "empty body")

        try:
            payload = response.json()
        except (ValueError, RecursionError) as exc:
            # Deeply nested arrays exhaust the decoder stack
            return _malformed(code, f"invalid JSON: {exc}")
        if not isinstance(payload, dict):
            return _malformed(code, f"expected a JSON object, got {type(payload).__name__}")

        try:
            airport = Airport.model_validate(payload)
        except ValidationError as exc:
            return _malformed(code, _describe_validation_error(exc))

        problem = validate_airport(airport, code)
        if problem:
            return _malformed(code, problem)

        logger.info("Resolved airport %s: %s", airport.iata, airport.name)
        return Result.success(airport)


def validate_airport(airport: Airport, requested_code: str) -> str | None:
    """Return a description of the first broken invariant, or None if valid."""

    if not airport.iata.strip():
        return f"IATA code missing for airport {requested_code}"
    if not airport.name.strip():
        return f"name missing for airport {requested_code}"
    # (0, 0) means the directory has no coordinates for this airport
    if airport.latitude == 0 and airport.longitude == 0:
        return f"coordinates missing for airport {requested_code}"
    if airport.iata.strip().upper() != requested_code.strip().upper():
        return f"returned IATA code {airport.iata} does not match requested {requested_code}"
    return None


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "body"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)


def _malformed(code: str, detail: str) -> Result[Airport]:
    logger.warning("Malformed airport payload for %s: %s", code, detail)
    return Result.error(
        FailureKind.MALFORMED_RESPONSE,
        f"Invalid airport data received for {code}",
        detail=detail,
        code=code,
    )


def _cancelled(code: str) -> Result[Airport]:
    return Result.error(FailureKind.CANCELLED, f"Airport lookup for {code} was cancelled", code=code)


__all__ = ["AirportLookupClient", "validate_airport"]
