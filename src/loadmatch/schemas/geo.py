"""Geocoding and distance request/response schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ..models.domain import Coordinate, LocationDescriptor, Precision


class CoordinateModel(BaseModel):
    latitude: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(..., ge=-180, le=180, allow_inf_nan=False)

    def to_domain(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


class LocationModel(BaseModel):
    postal_code: Optional[str] = Field(default=None, description="US ZIP code; only the first 5 digits are used.")
    city: Optional[str] = None
    state: Optional[str] = Field(default=None, description="Two-letter state abbreviation used as a fallback.")

    def to_domain(self) -> LocationDescriptor:
        return LocationDescriptor(postal_code=self.postal_code, city=self.city, state=self.state)


class ResolvedCoordinateModel(BaseModel):
    latitude: float
    longitude: float
    resolved_city: Optional[str] = None
    resolved_state: Optional[str] = None
    precision: Precision

    @classmethod
    def from_domain(cls, coordinate: Coordinate) -> "ResolvedCoordinateModel":
        return cls(
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            resolved_city=coordinate.resolved_city,
            resolved_state=coordinate.resolved_state,
            precision=coordinate.precision,
        )


class DistanceRequest(BaseModel):
    a: CoordinateModel
    b: CoordinateModel


class DistanceResponse(BaseModel):
    miles: float
