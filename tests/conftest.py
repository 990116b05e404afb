from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

import httpx
import pytest

from app.schemas.airport import Airport


BASE_URL = "https://airports.test"

AIRPORT_PAYLOADS: dict[str, dict] = {
    "JFK": {
        "iata": "JFK",
        "name": "John F. Kennedy International Airport",
        "city": "New York",
        "country": "United States",
        "latitude": 40.6413,
        "longitude": -73.7781,
    },
    "LHR": {
        "iata": "LHR",
        "name": "Heathrow Airport",
        "city": "London",
        "country": "United Kingdom",
        "latitude": 51.4700,
        "longitude": -0.4543,
    },
    "SVO": {
        "iata": "SVO",
        "name": "Sheremetyevo International Airport",
        "city": "Moscow",
        "country": "Russia",
        "latitude": 55.9726,
        "longitude": 37.4146,
    },
}


def directory_handler(
    airports: dict[str, dict] | None = None,
    calls: list[httpx.Request] | None = None,
) -> Callable[[httpx.Request], httpx.Response]:
    """Fake airport directory: serves known codes, 404 for the rest."""
    known = AIRPORT_PAYLOADS if airports is None else airports

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        code = request.url.path.rsplit("/", 1)[-1]
        payload = known.get(code)
        if payload is None:
            return httpx.Response(404, json={"message": "not found"})
        return httpx.Response(200, json=payload)

    return handler


def make_airport(iata: str, latitude: float, longitude: float, **extra) -> Airport:
    return Airport(
        iata=iata,
        name=extra.get("name", f"Airport {iata}"),
        city=extra.get("city", "City"),
        country=extra.get("country", "Country"),
        latitude=latitude,
        longitude=longitude,
    )


@pytest.fixture()
def jfk() -> Airport:
    return Airport.model_validate(AIRPORT_PAYLOADS["JFK"])


@pytest.fixture()
def lhr() -> Airport:
    return Airport.model_validate(AIRPORT_PAYLOADS["LHR"])
