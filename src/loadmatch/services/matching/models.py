"""Load matching result models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ...models.domain import DetourScore


@dataclass(slots=True)
class SuggestionResult:
    scores: List[DetourScore]
    route_miles: float
    max_detour_miles: float
    available_capacity_cuft: float | None
    skipped_over_capacity: int
    skipped_over_detour: int
