"""
Scoring de listings.

Cada factor produce un sub-score en [0, 1] que se pondera con su peso
configurado. El score final es la suma ponderada sobre el peso
efectivamente aplicado, en escala 0-100.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from haven.config import get_settings
from haven.geo import distance_miles, format_distance, score_by_distance
from haven.matching.amenities import extract_amenities, normalize_amenity
from haven.models import (
    LearnedProfile,
    LegacyListing,
    NYCListing,
    ScoringWeights,
    UserPreferences,
)

AnyListing = Union[NYCListing, LegacyListing]

NEUTRAL_SCORE = 0.5
NEUTRAL_MATCH_SCORE = 50.0

# Cold start: 8 amenities o más es puntaje completo
COLD_START_AMENITY_TARGET = 8
# Cubrir la mitad del peso aprendido ya es match perfecto
LEARNED_AMENITY_COVERAGE = 0.5

SQFT_FLOOR = 300
SQFT_CEILING = 2500


@dataclass
class FactorScore:
    """Aporte de un factor al score final."""

    score: float  # peso * sub-score
    percentage: float  # sub-score * 100
    label: str


@dataclass
class ScoreBreakdown:
    """Desglose por factor; None si el factor no aplicó."""

    distance: Optional[FactorScore] = None
    amenities: Optional[FactorScore] = None
    property_features: Optional[FactorScore] = None
    quality: Optional[FactorScore] = None
    rating: Optional[FactorScore] = None


@dataclass
class MatchScore:
    """Score 0-100 + desglose."""

    score: float
    breakdown: ScoreBreakdown


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _closeness(value: float, target: float) -> float:
    """1 en el target, decae linealmente hasta 0 a distancia `target`."""
    return max(0.0, 1 - abs(value - target) / target)


# --- Property features ---


def sqft_score(sqft: float, bedrooms: float, learned: LearnedProfile) -> float:
    """Cercanía a la mediana aprendida para esos dormitorios, o escala lineal 300-2500."""
    median_sqft = learned.avg_sqft_by_bedrooms.get(int(bedrooms))
    if median_sqft:
        return _closeness(sqft, median_sqft)
    return _clamp((sqft - SQFT_FLOOR) / (SQFT_CEILING - SQFT_FLOOR))


def building_age_score(age: float) -> float:
    """
    Curva en U: obra nueva y edificios históricos puntúan alto,
    los de mediana edad quedan en 0.5.
    """
    age = max(0.0, age)
    if age <= 10:
        return 1 - 0.01 * age
    if age <= 20:
        return 0.9 - 0.02 * (age - 10)
    if age <= 40:
        return 0.7 - 0.01 * (age - 20)
    if age <= 80:
        return 0.5
    if age < 100:
        return 0.5 + 0.015 * (age - 80)
    return 0.8


def renovation_score(
    building_age: float, years_since_renovation: Optional[float]
) -> float:
    if years_since_renovation is None:
        return 0.7 if building_age <= 10 else 0.4
    if years_since_renovation <= 5:
        return 1.0
    if years_since_renovation <= 10:
        return 0.8
    if years_since_renovation <= 20:
        return 0.6
    return 0.3


def property_feature_score(
    listing: AnyListing, learned: LearnedProfile, current_year: int
) -> tuple[float, str]:
    """Sub-score y label del factor; los listings legacy valen 0.5."""
    if not isinstance(listing, NYCListing):
        label = f"{listing.sqft:g} sqft" if listing.sqft > 0 else "N/A"
        return NEUTRAL_SCORE, label

    age = max(0, current_year - listing.year_built)
    years_since_renovation = None
    if listing.renovation_year is not None:
        years_since_renovation = max(0, current_year - listing.renovation_year)

    score = (
        0.4 * sqft_score(listing.sqft, listing.bedrooms, learned)
        + 0.3 * building_age_score(age)
        + 0.3 * renovation_score(age, years_since_renovation)
    )

    parts = []
    if listing.sqft > 0:
        parts.append(f"{listing.sqft:g} sqft")
    parts.append(f"Built {listing.year_built}")
    return _clamp(score), ", ".join(parts)


# --- Quality ---


def _image_score(image_count: int, learned: LearnedProfile) -> float:
    if learned.avg_image_count:
        return _closeness(image_count, learned.avg_image_count)
    if image_count >= 5:
        return 1.0
    if image_count >= 3:
        return 0.7
    if image_count >= 1:
        return 0.4
    return 0.0


def _description_score(description: str, learned: LearnedProfile) -> float:
    length = len(description)
    if learned.avg_description_length and description:
        return _closeness(length, learned.avg_description_length)
    if length > 200:
        return 1.0
    if length > 100:
        return 0.7
    if length > 0:
        return 0.4
    return 0.0


def quality_score(listing: AnyListing, learned: LearnedProfile) -> tuple[float, str]:
    """Mitad fotos, mitad descripción."""
    image_count = len(listing.images)
    score = 0.5 * _image_score(image_count, learned) + 0.5 * _description_score(
        listing.description, learned
    )

    if image_count == 0:
        label = "No photos"
    elif image_count == 1:
        label = "1 photo"
    else:
        label = f"{image_count} photos"
    return score, label


# --- Amenities ---


def _amenity_label(names: list[str]) -> str:
    if not names:
        return "No match"
    if len(names) <= 2:
        return ", ".join(names)
    return f"{', '.join(names[:2])}+"


def amenity_score(
    listing: AnyListing, learned: LearnedProfile
) -> Optional[tuple[float, str]]:
    """
    Sub-score de amenities.

    Con preferencias aprendidas siempre aplica (un listing sin amenities
    vale 0). En cold start solo aplica si el listing tiene amenities.
    """
    amenities = extract_amenities(listing)

    if learned.preferred_amenities:
        total_weight = sum(learned.preferred_amenities.values())
        matched = []
        raw = 0.0
        for amenity in amenities:
            weight = learned.preferred_amenities.get(normalize_amenity(amenity), 0.0)
            if weight > 0:
                matched.append(amenity)
            raw += weight
        score = 0.0
        if total_weight > 0:
            score = min(1.0, raw / (total_weight * LEARNED_AMENITY_COVERAGE))
        return score, _amenity_label(matched)

    if not amenities:
        return None
    score = min(1.0, len(amenities) / COLD_START_AMENITY_TARGET)
    return score, _amenity_label(amenities)


# --- Rating ---


def rating_score(listing: AnyListing) -> tuple[float, str]:
    """avg/5 con al menos una reseña; sin reseñas, neutral 0.5."""
    if listing.average_rating is not None and listing.total_ratings >= 1:
        return _clamp(listing.average_rating / 5.0), f"{listing.average_rating:.1f}★"
    return NEUTRAL_SCORE, "No reviews"


def calculate_match_score(
    listing: AnyListing,
    preferences: UserPreferences,
    learned: Optional[LearnedProfile] = None,
    weights: Optional[ScoringWeights] = None,
    current_year: Optional[int] = None,
) -> MatchScore:
    """
    Calcula el match score (0-100) de un listing para un usuario.

    Args:
        listing: Listing a evaluar (ya filtrado)
        preferences: Preferencias del usuario
        learned: Preferencias aprendidas en formato interno (None = cold start)
        weights: Pesos a usar (None = los del usuario o los de config)
        current_year: Año de referencia para antigüedades

    Returns:
        MatchScore con el score y el desglose por factor
    """
    learned = learned or LearnedProfile()
    weights = weights or preferences.weights or get_settings().default_scoring_weights()
    year = current_year or datetime.now(timezone.utc).year

    breakdown = ScoreBreakdown()
    total = 0.0
    max_total = 0.0

    def add(weight: float, sub_score: float, label: str) -> FactorScore:
        nonlocal total, max_total
        total += weight * sub_score
        max_total += weight
        return FactorScore(score=weight * sub_score, percentage=sub_score * 100, label=label)

    user_location = preferences.location
    if user_location is not None and listing.has_coordinates:
        miles = distance_miles(
            user_location[0], user_location[1], listing.latitude, listing.longitude
        )
        breakdown.distance = add(
            weights.distance, score_by_distance(miles), format_distance(miles)
        )

    amenities = amenity_score(listing, learned)
    if amenities is not None:
        breakdown.amenities = add(weights.amenities, *amenities)

    breakdown.property_features = add(
        weights.property_features, *property_feature_score(listing, learned, year)
    )
    breakdown.quality = add(weights.quality, *quality_score(listing, learned))
    breakdown.rating = add(weights.rating, *rating_score(listing))

    if max_total == 0:
        return MatchScore(score=NEUTRAL_MATCH_SCORE, breakdown=breakdown)

    return MatchScore(score=_clamp(total / max_total * 100, 0.0, 100.0), breakdown=breakdown)
