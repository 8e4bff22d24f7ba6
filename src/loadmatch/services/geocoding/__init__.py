"""Geocoding services."""

from .cache import CoordinateCache
from .postal_client import PostalLookup, ZippopotamClient
from .service import Geocoder, get_geocoder
from .strategies import PostalCodeStrategy, ResolutionStrategy, StateCenterStrategy

__all__ = [
    "CoordinateCache",
    "Geocoder",
    "get_geocoder",
    "PostalLookup",
    "ZippopotamClient",
    "ResolutionStrategy",
    "PostalCodeStrategy",
    "StateCenterStrategy",
]
