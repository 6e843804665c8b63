"""
Motor de ranking de listings.

Implementa:
- Filtro Hard: Descarta listings fuera de criterios absolutos
- Preferencias aprendidas: Usa las guardadas o las recalcula desde los swipes
- Scoring: Score 0-100 ponderado por factor, con desglose para la UI
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

import structlog

from haven.config import Settings, get_settings
from haven.matching.filters import apply_hard_filters
from haven.matching.learning import learn_from_swipe_history
from haven.matching.scoring import ScoreBreakdown, calculate_match_score
from haven.models import (
    LearnedProfile,
    LegacyListing,
    NYCListing,
    SwipeRecord,
    UserPreferences,
)

logger = structlog.get_logger()

AnyListing = Union[NYCListing, LegacyListing]


@dataclass
class RankedListing:
    """Resultado de ranking para un listing."""

    listing: AnyListing
    match_score: float  # 0 a 100
    is_top_pick: bool
    score_breakdown: ScoreBreakdown


class RankingEngine:
    """
    Motor de ranking con hard filters + scoring ponderado.

    Flujo:
    1. Resolver preferencias aprendidas (guardadas o recalculadas)
    2. Aplicar filtros hard
    3. Calcular score de cada listing restante
    4. Ordenar de mayor a menor y marcar top picks
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def resolve_learned_profile(
        self,
        listings: Sequence[AnyListing],
        preferences: UserPreferences,
        swipe_history: Iterable[SwipeRecord],
    ) -> LearnedProfile:
        """
        Preferencias aprendidas en formato interno.

        Las guardadas en el perfil tienen prioridad; solo si no traen
        amenities se recalculan desde el historial (datos previos al
        aprendizaje).
        """
        stored = preferences.learned
        if stored is not None and stored.preferred_amenities:
            return LearnedProfile.from_stored(stored)
        return learn_from_swipe_history(swipe_history, listings)

    def rank_listings(
        self,
        listings: Iterable[AnyListing],
        preferences: UserPreferences,
        swipe_history: Iterable[SwipeRecord] = (),
        current_year: Optional[int] = None,
    ) -> list[RankedListing]:
        """
        Rankea listings para un usuario.

        Args:
            listings: Corpus completo de listings visibles
            preferences: Preferencias del usuario
            swipe_history: Historial de swipes (solo se usa sin preferencias guardadas)
            current_year: Año de referencia para antigüedades

        Returns:
            Lista de RankedListing ordenada por score descendente
        """
        listings = list(listings)
        learned = self.resolve_learned_profile(listings, preferences, swipe_history)
        weights = preferences.weights or self.settings.default_scoring_weights()

        candidates = apply_hard_filters(listings, preferences)

        ranked = []
        for listing in candidates:
            match = calculate_match_score(
                listing,
                preferences,
                learned,
                weights=weights,
                current_year=current_year,
            )
            ranked.append(
                RankedListing(
                    listing=listing,
                    match_score=match.score,
                    is_top_pick=match.score >= self.settings.top_pick_threshold,
                    score_breakdown=match.breakdown,
                )
            )

        # sort es estable: empates conservan el orden del corpus
        ranked.sort(key=lambda r: r.match_score, reverse=True)

        logger.info(
            "Ranking calculado",
            total=len(listings),
            after_filters=len(candidates),
            top_picks=sum(1 for r in ranked if r.is_top_pick),
            personalized=not learned.is_empty,
        )

        return ranked


def rank_listings(
    listings: Iterable[AnyListing],
    preferences: UserPreferences,
    swipe_history: Iterable[SwipeRecord] = (),
    current_year: Optional[int] = None,
) -> list[RankedListing]:
    """Atajo sobre `RankingEngine` con la configuración global."""
    return RankingEngine().rank_listings(listings, preferences, swipe_history, current_year)
