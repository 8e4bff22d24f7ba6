"""Load matching services."""

from .models import SuggestionResult
from .service import available_capacity, rank_candidates, suggest_loads

__all__ = [
    "SuggestionResult",
    "available_capacity",
    "rank_candidates",
    "suggest_loads",
]
