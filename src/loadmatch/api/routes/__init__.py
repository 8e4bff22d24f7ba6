"""Route group exports."""

from . import geocoding, health, matching

__all__ = ["geocoding", "health", "matching"]
