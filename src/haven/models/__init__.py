"""
Modelos de datos del motor.

- Listings: NYCListing / LegacyListing (unión etiquetada por `kind`)
- Usuario: preferencias, filtros hard, swipes y preferencias aprendidas
- ML: stats de normalización, pesos del modelo y resultados
"""

from haven.models.listing import (
    AmenityFlags,
    NYCListing,
    LegacyListing,
    Listing,
    parse_listing,
    parse_listings,
)
from haven.models.ml import (
    FeatureStats,
    ModelWeights,
    TrainingResult,
    SuggestedWeights,
)
from haven.models.user import (
    SwipeRecord,
    ScoringWeights,
    HardFilters,
    LearnedProfile,
    LearnedPreferences,
    UserPreferences,
)

__all__ = [
    # Listings
    "AmenityFlags",
    "NYCListing",
    "LegacyListing",
    "Listing",
    "parse_listing",
    "parse_listings",
    # ML
    "FeatureStats",
    "ModelWeights",
    "TrainingResult",
    "SuggestedWeights",
    # Usuario
    "SwipeRecord",
    "ScoringWeights",
    "HardFilters",
    "LearnedProfile",
    "LearnedPreferences",
    "UserPreferences",
]
