"""Rank candidate loads by how far they pull a driver off the planned route."""

from __future__ import annotations

import logging
from typing import Sequence

from ...config import settings
from ...errors import InsufficientRoute, LocationUnresolved, LookupUnavailable
from ...models.domain import CandidateLoad, Coordinate, DetourScore, Route, RouteWaypoint
from ...schemas.geo import ResolvedCoordinateModel
from ...schemas.matching import (
    CandidateModel,
    DetourScoreModel,
    RankRequest,
    RankResponse,
    SuggestionRequest,
    SuggestionResponse,
    WaypointModel,
)
from .. import geospatial
from ..geocoding.service import Geocoder, get_geocoder
from .models import SuggestionResult

logger = logging.getLogger(__name__)


def _route_points(route: Route) -> list[Coordinate]:
    points = [waypoint.coordinate for waypoint in route]
    if len(points) < 2:
        raise InsufficientRoute(f"Load matching needs at least 2 route waypoints, got {len(points)}.")
    return points


def _nearest_leg(points: Sequence[Coordinate], pickup: Coordinate) -> tuple[int, float]:
    """Return (leg index, added miles) for the leg with the cheapest detour."""
    best_leg = 0
    best_miles = geospatial.added_miles(points[0], points[1], pickup)
    for leg in range(1, len(points) - 1):
        miles = geospatial.added_miles(points[leg], points[leg + 1], pickup)
        if miles < best_miles:
            best_leg, best_miles = leg, miles
    return best_leg, best_miles


def _score(points: Sequence[Coordinate], candidate: CandidateLoad) -> DetourScore:
    leg, added = _nearest_leg(points, candidate.pickup_coordinate)
    revenue_per_mile: float | None = None
    if candidate.stated_revenue is not None and added > 0:
        revenue_per_mile = float(candidate.stated_revenue) / added
    return DetourScore(
        candidate_id=candidate.id,
        added_miles=added,
        revenue_per_added_mile=revenue_per_mile,
        rank=0,
        distance_from_route=geospatial.distance_from_route(points, candidate.pickup_coordinate),
        nearest_leg=leg,
        pickup_precision=candidate.pickup_coordinate.precision,
    )


def _ranking_key(score: DetourScore) -> tuple[int, float]:
    if score.revenue_per_added_mile is not None:
        return (0, -score.revenue_per_added_mile)
    return (1, score.added_miles)


def _assign_ranks(scores: list[DetourScore]) -> list[DetourScore]:
    for position, score in enumerate(scores, start=1):
        score.rank = position
    return scores


def rank_candidates(
    route: Route,
    candidates: Sequence[CandidateLoad],
) -> list[DetourScore]:
    """Score every candidate against the nearest leg of ``route`` and rank them.

    Candidates with a revenue-per-added-mile figure come first, highest first.
    The rest follow by added miles ascending. Ties keep input order.
    """
    points = _route_points(route)
    if not candidates:
        return []
    scores = [_score(points, candidate) for candidate in candidates]
    # sorted() is stable, so equal keys keep input order
    return _assign_ranks(sorted(scores, key=_ranking_key))


def available_capacity(
    truck_capacity_cuft: float | None,
    trailer_capacity_cuft: float | None,
    used_capacity_cuft: float = 0.0,
) -> float | None:
    """Cubic feet still free on the trip; trailer capacity takes precedence over the truck's."""
    capacity = trailer_capacity_cuft or truck_capacity_cuft
    if capacity is None:
        return None
    return max(0.0, capacity - (used_capacity_cuft or 0.0))


def suggest_loads(
    route: Route,
    candidates: Sequence[CandidateLoad],
    *,
    max_detour_miles: float | None = None,
    available_capacity_cuft: float | None = None,
    max_cuft: float | None = None,
) -> SuggestionResult:
    """Filter candidates by capacity and detour limit, then rank what remains."""
    points = _route_points(route)
    limit = settings.default_max_detour_miles if max_detour_miles is None else max_detour_miles
    if limit < 0:
        raise ValueError("max_detour_miles must be >= 0")

    fitting: list[CandidateLoad] = []
    skipped_capacity = 0
    for candidate in candidates:
        volume = candidate.cubic_feet
        if volume and max_cuft is not None and volume > max_cuft:
            skipped_capacity += 1
            continue
        if volume and available_capacity_cuft is not None and volume > available_capacity_cuft:
            skipped_capacity += 1
            continue
        fitting.append(candidate)

    ranked = rank_candidates(route, fitting)
    kept = [score for score in ranked if score.added_miles <= limit]
    skipped_detour = len(ranked) - len(kept)

    logger.info(
        f"Suggested {len(kept)} of {len(candidates)} loads "
        f"({skipped_capacity} over capacity, {skipped_detour} over {limit:g} mi detour)"
    )
    return SuggestionResult(
        scores=_assign_ranks(kept),
        route_miles=geospatial.route_length(points),
        max_detour_miles=limit,
        available_capacity_cuft=available_capacity_cuft,
        skipped_over_capacity=skipped_capacity,
        skipped_over_detour=skipped_detour,
    )


def _resolve_waypoint(waypoint: WaypointModel, geocoder: Geocoder) -> Coordinate:
    if waypoint.coordinate is not None:
        return waypoint.coordinate.to_domain()
    return geocoder.geocode(waypoint.location.to_domain())


def _score_model(
    score: DetourScore,
    pickup: Coordinate | None = None,
    delivery: Coordinate | None = None,
) -> DetourScoreModel:
    return DetourScoreModel(
        candidate_id=score.candidate_id,
        rank=score.rank,
        added_miles=round(score.added_miles, 2),
        revenue_per_added_mile=(
            round(score.revenue_per_added_mile, 2) if score.revenue_per_added_mile is not None else None
        ),
        distance_from_route=round(score.distance_from_route, 2),
        nearest_leg=score.nearest_leg,
        pickup_precision=score.pickup_precision,
        pickup=ResolvedCoordinateModel.from_domain(pickup) if pickup is not None else None,
        delivery=ResolvedCoordinateModel.from_domain(delivery) if delivery is not None else None,
    )


def process_rank_request(request: RankRequest) -> RankResponse:
    route = [RouteWaypoint(coordinate=point.to_domain()) for point in request.route]
    candidates = []
    for candidate in request.candidates:
        if candidate.pickup.coordinate is None:
            raise ValueError(f"Candidate '{candidate.id}' needs a pickup coordinate for ranking.")
        candidates.append(
            CandidateLoad(
                id=candidate.id,
                pickup_coordinate=candidate.pickup.coordinate.to_domain(),
                stated_revenue=candidate.stated_revenue,
                cubic_feet=candidate.cubic_feet,
            )
        )
    scores = rank_candidates(route, candidates)
    return RankResponse(scores=[_score_model(score) for score in scores])


def _resolve_delivery(candidate: CandidateModel, geocoder: Geocoder) -> Coordinate | None:
    """Best-effort delivery lookup for map display; failures leave it unset."""
    if candidate.delivery is None:
        return None
    try:
        return _resolve_waypoint(candidate.delivery, geocoder)
    except (LocationUnresolved, LookupUnavailable) as exc:
        logger.info(f"No delivery coordinate for load {candidate.id}: {exc}")
        return None


def process_suggestion_request(request: SuggestionRequest, geocoder: Geocoder | None = None) -> SuggestionResponse:
    """Geocode the route and candidate pickups, then suggest loads along the route.

    An unresolvable route waypoint fails the request. Candidates whose pickup
    cannot be resolved are skipped and counted. Delivery locations are only
    resolved for loads that make the final list.
    """
    geocoder = geocoder or get_geocoder()
    route_points = [_resolve_waypoint(waypoint, geocoder) for waypoint in request.route]
    route = [RouteWaypoint(coordinate=point) for point in route_points]

    candidates: list[CandidateLoad] = []
    by_id = {candidate.id: candidate for candidate in request.candidates}
    skipped_unresolved = 0
    for candidate in request.candidates:
        try:
            pickup = _resolve_waypoint(candidate.pickup, geocoder)
        except LocationUnresolved as exc:
            logger.info(f"Skipping load {candidate.id}: {exc}")
            skipped_unresolved += 1
            continue
        candidates.append(
            CandidateLoad(
                id=candidate.id,
                pickup_coordinate=pickup,
                stated_revenue=candidate.stated_revenue,
                cubic_feet=candidate.cubic_feet,
            )
        )
    pickups = {load.id: load.pickup_coordinate for load in candidates}

    capacity = available_capacity(
        request.truck_capacity_cuft,
        request.trailer_capacity_cuft,
        request.used_capacity_cuft,
    )
    result = suggest_loads(
        route,
        candidates,
        max_detour_miles=request.max_detour_miles,
        available_capacity_cuft=capacity,
        max_cuft=request.max_cuft,
    )
    return SuggestionResponse(
        route=[ResolvedCoordinateModel.from_domain(point) for point in route_points],
        route_miles=round(result.route_miles, 2),
        max_detour_miles=result.max_detour_miles,
        available_capacity_cuft=result.available_capacity_cuft,
        skipped_unresolved=skipped_unresolved,
        skipped_over_capacity=result.skipped_over_capacity,
        skipped_over_detour=result.skipped_over_detour,
        suggestions=[
            _score_model(
                score,
                pickup=pickups[score.candidate_id],
                delivery=_resolve_delivery(by_id[score.candidate_id], geocoder),
            )
            for score in result.scores
        ],
    )
