"""Geocoding and distance endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...errors import LocationUnresolved, LookupUnavailable
from ...schemas.geo import DistanceRequest, DistanceResponse, LocationModel, ResolvedCoordinateModel
from ...services import geospatial
from ...services.geocoding.service import get_geocoder

router = APIRouter(tags=["geocoding"])


@router.post("/geocode", response_model=ResolvedCoordinateModel, status_code=status.HTTP_200_OK)
def geocode(payload: LocationModel) -> ResolvedCoordinateModel:
    try:
        coordinate = get_geocoder().geocode(payload.to_domain())
    except LocationUnresolved as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except LookupUnavailable as exc:
        logging.warning(f"Postal lookup unavailable: {exc}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return ResolvedCoordinateModel.from_domain(coordinate)


@router.post("/distance", response_model=DistanceResponse, status_code=status.HTTP_200_OK)
def distance_between(payload: DistanceRequest) -> DistanceResponse:
    miles = geospatial.distance(payload.a.to_domain(), payload.b.to_domain())
    return DistanceResponse(miles=round(miles, 2))
