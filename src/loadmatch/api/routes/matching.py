"""Load matching endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...errors import InsufficientRoute, LocationUnresolved, LookupUnavailable
from ...schemas.matching import RankRequest, RankResponse, SuggestionRequest, SuggestionResponse
from ...services.matching.service import process_rank_request, process_suggestion_request

router = APIRouter(prefix="/matching", tags=["matching"])


@router.post("/rank", response_model=RankResponse, status_code=status.HTTP_200_OK)
def rank(payload: RankRequest) -> RankResponse:
    try:
        return process_rank_request(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post("/suggestions", response_model=SuggestionResponse, status_code=status.HTTP_200_OK)
def suggestions(payload: SuggestionRequest) -> SuggestionResponse:
    try:
        return process_suggestion_request(payload)
    except InsufficientRoute as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except LocationUnresolved as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Could not geocode trip locations: {exc}",
        ) from exc
    except LookupUnavailable as exc:
        logging.warning(f"Postal lookup unavailable while building suggestions: {exc}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error building load suggestions: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get suggestions: {str(exc)}",
        ) from exc
