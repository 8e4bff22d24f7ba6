"""Exceptions raised by the geocoding and load matching engine."""


class LoadMatchError(Exception):
    """Base class for all engine errors."""


class InvalidCoordinate(LoadMatchError, ValueError):
    """Latitude/longitude outside geographic bounds or not a finite number."""


class LocationUnresolved(LoadMatchError):
    """No resolution strategy could turn the location into a coordinate."""


class InvalidLocationInput(LocationUnresolved):
    """Malformed postal code with no usable state fallback."""


class LookupUnavailable(LoadMatchError):
    """Transient failure reaching the postal lookup service. Safe to retry."""


class InsufficientRoute(LoadMatchError, ValueError):
    """The load matcher needs a route with at least two waypoints."""
