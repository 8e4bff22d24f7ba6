"""Geocoder: resolve postal codes or states to coordinates."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Sequence

from ...errors import InvalidLocationInput, LocationUnresolved
from ...models.domain import Coordinate, LocationDescriptor, PostalLookupKey
from .cache import CoordinateCache
from .postal_client import PostalLookup, ZippopotamClient
from .strategies import PostalCodeStrategy, ResolutionStrategy, StateCenterStrategy

logger = logging.getLogger(__name__)


class Geocoder:
    """Try each resolution strategy in order until one produces a coordinate.

    The default chain is an exact postal code lookup (cache first) followed by
    a state-center fallback. Coordinates carry a precision tag so callers can
    tell the two apart.
    """

    def __init__(
        self,
        lookup: PostalLookup,
        cache: CoordinateCache | None = None,
        strategies: Sequence[ResolutionStrategy] | None = None,
    ) -> None:
        self.cache = cache if cache is not None else CoordinateCache()
        self.strategies: tuple[ResolutionStrategy, ...] = tuple(
            strategies
            if strategies is not None
            else (PostalCodeStrategy(lookup, self.cache), StateCenterStrategy())
        )

    def geocode(self, descriptor: LocationDescriptor) -> Coordinate:
        for strategy in self.strategies:
            coordinate = strategy.resolve(descriptor)
            if coordinate is not None:
                return coordinate

        postal_code = descriptor.postal_code
        if postal_code is not None and postal_code.strip() and PostalLookupKey.parse(postal_code) is None:
            raise InvalidLocationInput(
                f"Postal code '{postal_code}' is not a 5-digit code and no usable state was given."
            )
        raise LocationUnresolved(f"Unable to geocode location: {_describe(descriptor)}")

    def geocode_parts(
        self,
        postal_code: str | None = None,
        city: str | None = None,
        state: str | None = None,
    ) -> Coordinate:
        return self.geocode(LocationDescriptor(postal_code=postal_code, city=city, state=state))


@lru_cache()
def get_geocoder() -> Geocoder:
    """Shared geocoder backed by the public lookup service; its cache lives for the process."""
    return Geocoder(ZippopotamClient())


def _describe(descriptor: LocationDescriptor) -> str:
    parts = [
        f"{label}={value!r}"
        for label, value in (
            ("postal_code", descriptor.postal_code),
            ("city", descriptor.city),
            ("state", descriptor.state),
        )
        if value
    ]
    return ", ".join(parts) or "no location given"
