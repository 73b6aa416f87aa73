"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.profile import GeoPoint

PHONE_PATTERN = r"^\+?[0-9\s\-()]*$"


class ErrorResponse(BaseModel):
    """Standardized error response."""

    error_code: str
    message: str
    details: Any | None = None


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str


class GeoPointSchema(BaseModel):
    """A WGS84 coordinate pair."""

    model_config = ConfigDict(from_attributes=True)

    latitude: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(..., ge=-180, le=180, allow_inf_nan=False)

    @classmethod
    def from_point(cls, point: GeoPoint | None) -> "GeoPointSchema | None":
        if point is None:
            return None
        return cls(latitude=point.latitude, longitude=point.longitude)
