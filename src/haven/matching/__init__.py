"""
Motor de ranking.

Combina filtros hard, preferencias aprendidas de los swipes y un
score ponderado para ordenar los listings de cada usuario.
"""

from haven.matching.amenities import AmenityNormalizer, extract_amenities, normalize_amenity
from haven.matching.engine import RankedListing, RankingEngine, rank_listings
from haven.matching.filters import apply_hard_filters, passes_hard_filters
from haven.matching.learning import (
    calculate_learned_preferences,
    learn_from_swipe_history,
    median,
    should_update_learned_preferences,
)
from haven.matching.scoring import (
    FactorScore,
    MatchScore,
    ScoreBreakdown,
    calculate_match_score,
)

__all__ = [
    # Amenities
    "AmenityNormalizer",
    "extract_amenities",
    "normalize_amenity",
    # Filtros
    "apply_hard_filters",
    "passes_hard_filters",
    # Aprendizaje
    "calculate_learned_preferences",
    "learn_from_swipe_history",
    "median",
    "should_update_learned_preferences",
    # Scoring
    "FactorScore",
    "MatchScore",
    "ScoreBreakdown",
    "calculate_match_score",
    # Ranking
    "RankedListing",
    "RankingEngine",
    "rank_listings",
]
