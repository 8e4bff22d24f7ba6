"""Resolution strategies tried in order by the geocoder."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ...models.domain import Coordinate, LocationDescriptor, PostalLookupKey, Precision
from .cache import CoordinateCache
from .postal_client import PostalLookup
from .state_centers import STATE_CENTERS, normalize_state

logger = logging.getLogger(__name__)


class ResolutionStrategy(ABC):
    """Contract for turning a location descriptor into a coordinate."""

    name: str

    @abstractmethod
    def resolve(self, descriptor: LocationDescriptor) -> Coordinate | None:
        """Return a coordinate, or None to let the next strategy try."""
        raise NotImplementedError


class PostalCodeStrategy(ResolutionStrategy):
    """Exact postal code match, cache first."""

    name = "postal_code"

    def __init__(self, lookup: PostalLookup, cache: CoordinateCache) -> None:
        self.lookup = lookup
        self.cache = cache

    def resolve(self, descriptor: LocationDescriptor) -> Coordinate | None:
        key = PostalLookupKey.parse(descriptor.postal_code)
        if key is None:
            return None

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Postal code {key} served from cache")
            return cached

        logger.debug(f"Postal code {key} not cached, querying lookup service")
        # LookupUnavailable propagates; negative results are not cached
        result = self.lookup.lookup(key)
        if result is None:
            logger.debug(f"Postal code {key} not found")
            return None

        coordinate = Coordinate(
            latitude=result.latitude,
            longitude=result.longitude,
            resolved_city=result.city,
            resolved_state=result.state,
            precision=Precision.POSTAL_CODE,
        )
        self.cache.put(key, coordinate)
        return coordinate


class StateCenterStrategy(ResolutionStrategy):
    """Coarse fallback to the geographic center of the given state."""

    name = "state_center"

    def resolve(self, descriptor: LocationDescriptor) -> Coordinate | None:
        state = normalize_state(descriptor.state)
        if state is None:
            return None
        lat, lon = STATE_CENTERS[state]
        logger.info(f"Resolved {descriptor.city or '?'}, {state} via {self.name} fallback")
        return Coordinate(
            latitude=lat,
            longitude=lon,
            resolved_city=descriptor.city or None,
            resolved_state=state,
            precision=Precision.STATE_CENTER,
        )
