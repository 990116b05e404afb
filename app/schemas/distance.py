from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from app.schemas.airport import Airport

IATA_CODE_PATTERN = r"^[A-Z]{3}$"


class DistanceRequest(BaseModel):
    """Request for the distance between two airports."""

    from_airport: str = Field(
        ...,
        min_length=3,
        max_length=3,
        pattern=IATA_CODE_PATTERN,
        description="IATA code of the departure airport (e.g., JFK)",
    )
    to_airport: str = Field(
        ...,
        min_length=3,
        max_length=3,
        pattern=IATA_CODE_PATTERN,
        description="IATA code of the arrival airport (e.g., LHR)",
    )


class DistanceResponse(BaseModel):
    """Response for the distance between two airports."""

    from_airport: Airport
    to_airport: Airport
    distance_in_miles: float = Field(..., description="Great-circle distance in miles")
    distance_in_kilometers: float = Field(..., description="Great-circle distance in kilometers")
    execution_time_ms: int = Field(..., description="Time spent serving the request")


class ApiError(BaseModel):
    """Error response."""

    error_code: str
    message: str
    details: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
