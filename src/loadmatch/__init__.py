"""Geospatial distance and detour-based load matching."""
