"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_postal_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.geocoding.postal_client import check_health as postal_health_check
    return postal_health_check


@router.get("/health/postal-lookup", status_code=status.HTTP_200_OK)
def health_postal_lookup() -> dict:
    """Check that the postal lookup service answers."""
    postal_health_check = _get_postal_health_check()
    return {"service": "postal-lookup", "healthy": postal_health_check()}
