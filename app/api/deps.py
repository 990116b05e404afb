from __future__ import annotations

import httpx
from fastapi import Depends, Request

from app.services.airport_client import AirportLookupClient
from app.services.distance_service import DistanceService


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the HTTP client opened by the application lifespan."""
    return request.app.state.http_client


def get_airport_client(http_client: httpx.AsyncClient = Depends(get_http_client)) -> AirportLookupClient:
    return AirportLookupClient(http_client)


def get_distance_service(
    lookup_client: AirportLookupClient = Depends(get_airport_client),
) -> DistanceService:
    return DistanceService(lookup_client)
