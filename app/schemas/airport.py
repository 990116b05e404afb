from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Airport(BaseModel):
    """One airport as returned by the external directory."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    iata: str = Field(..., description="IATA airport code")
    name: str = Field(..., description="Airport name")
    city: str = Field(..., description="City served by the airport")
    country: str = Field(..., description="Country of the airport")
    latitude: float = Field(..., strict=True, ge=-90, le=90, description="Latitude in degrees")
    longitude: float = Field(..., strict=True, ge=-180, le=180, description="Longitude in degrees")

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        # Upstream key casing is not stable ("IATA", "Latitude", ...)
        if isinstance(data, dict):
            return {str(key).lower(): value for key, value in data.items()}
        return data

    @field_validator("iata")
    @classmethod
    def normalize_iata(cls, value: str) -> str:
        return value.strip().upper()
