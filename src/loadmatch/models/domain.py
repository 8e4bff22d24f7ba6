"""Domain models for coordinates, routes and candidate loads."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Sequence

from ..errors import InvalidCoordinate

POSTAL_CODE_LENGTH = 5


class Precision(str, Enum):
    """How precisely a coordinate was resolved."""

    POSTAL_CODE = "postal_code"
    STATE_CENTER = "state_center"
    SUPPLIED = "supplied"


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A validated latitude/longitude pair, optionally annotated with where it came from."""

    latitude: float
    longitude: float
    resolved_city: Optional[str] = None
    resolved_state: Optional[str] = None
    precision: Precision = Precision.SUPPLIED

    def __post_init__(self) -> None:
        for name, value, bound in (("latitude", self.latitude, 90.0), ("longitude", self.longitude, 180.0)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidCoordinate(f"{name} must be a real number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidCoordinate(f"{name} must be finite, got {value!r}")
            if not -bound <= value <= bound:
                raise InvalidCoordinate(f"{name} {value} outside [-{bound:g}, {bound:g}]")

    def same_point(self, other: Coordinate) -> bool:
        return self.latitude == other.latitude and self.longitude == other.longitude


@dataclass(frozen=True, slots=True)
class PostalLookupKey:
    """Normalized 5-digit postal code used as the coordinate cache key."""

    value: str

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional[PostalLookupKey]:
        """Strip and truncate ``raw`` to five characters; return None unless all are digits."""
        if raw is None:
            return None
        candidate = str(raw).strip()[:POSTAL_CODE_LENGTH]
        if len(candidate) != POSTAL_CODE_LENGTH or not (candidate.isascii() and candidate.isdigit()):
            return None
        return cls(candidate)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class LocationDescriptor:
    postal_code: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None


@dataclass(frozen=True, slots=True)
class PostalLookupResult:
    """Successful answer from the postal lookup collaborator."""

    latitude: float
    longitude: float
    city: Optional[str]
    state: Optional[str]


@dataclass(frozen=True, slots=True)
class RouteWaypoint:
    coordinate: Coordinate


Route = Sequence[RouteWaypoint]


@dataclass(frozen=True, slots=True)
class CandidateLoad:
    """A load a driver might add to their route."""

    id: str
    pickup_coordinate: Coordinate
    stated_revenue: Optional[Decimal] = None
    cubic_feet: Optional[float] = None


@dataclass(slots=True)
class DetourScore:
    candidate_id: str
    added_miles: float
    revenue_per_added_mile: Optional[float]
    rank: int
    distance_from_route: float
    nearest_leg: int
    pickup_precision: Precision
