"""Load matching request/response schemas."""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from ..models.domain import Precision
from .geo import CoordinateModel, LocationModel, ResolvedCoordinateModel


class WaypointModel(BaseModel):
    """A route point given either as a coordinate or as a location to geocode."""

    coordinate: Optional[CoordinateModel] = None
    location: Optional[LocationModel] = None

    @model_validator(mode="after")
    def _require_one(self) -> "WaypointModel":
        if self.coordinate is None and self.location is None:
            raise ValueError("Either 'coordinate' or 'location' is required.")
        return self


class CandidateModel(BaseModel):
    id: str
    pickup: WaypointModel
    delivery: Optional[WaypointModel] = Field(
        default=None,
        description="Delivery location; resolved for map display only and never affects ranking.",
    )
    stated_revenue: Optional[Decimal] = Field(default=None, ge=0)
    cubic_feet: Optional[float] = Field(default=None, ge=0)


class RankRequest(BaseModel):
    route: List[CoordinateModel]
    candidates: List[CandidateModel] = Field(default_factory=list)


class SuggestionRequest(BaseModel):
    route: List[WaypointModel]
    candidates: List[CandidateModel] = Field(default_factory=list)
    max_detour_miles: Optional[float] = Field(default=None, ge=0)
    truck_capacity_cuft: Optional[float] = Field(default=None, ge=0)
    trailer_capacity_cuft: Optional[float] = Field(default=None, ge=0)
    used_capacity_cuft: float = Field(default=0.0, ge=0)
    max_cuft: Optional[float] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _unique_candidate_ids(self) -> "SuggestionRequest":
        seen: set[str] = set()
        duplicates: set[str] = set()
        for candidate in self.candidates:
            if candidate.id in seen:
                duplicates.add(candidate.id)
            seen.add(candidate.id)
        if duplicates:
            raise ValueError(f"Candidate ids must be unique; repeated: {', '.join(sorted(duplicates))}")
        return self


class DetourScoreModel(BaseModel):
    candidate_id: str
    rank: int
    added_miles: float
    revenue_per_added_mile: Optional[float] = None
    distance_from_route: float
    nearest_leg: int
    pickup_precision: Precision
    pickup: Optional[ResolvedCoordinateModel] = None
    delivery: Optional[ResolvedCoordinateModel] = None


class RankResponse(BaseModel):
    scores: List[DetourScoreModel]


class SuggestionResponse(BaseModel):
    route: List[ResolvedCoordinateModel]
    route_miles: float
    max_detour_miles: float
    available_capacity_cuft: Optional[float] = None
    skipped_unresolved: int
    skipped_over_capacity: int
    skipped_over_detour: int
    suggestions: List[DetourScoreModel]
