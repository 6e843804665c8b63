"""
Aprendizaje de preferencias desde el historial de swipes.

Deriva afinidad por amenities (contrastando likes contra dislikes),
calidad típica de los anuncios que le gustan al usuario y superficie
preferida por cantidad de dormitorios.
"""

from collections import Counter, defaultdict
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Sequence, Union

import structlog

from haven.config import get_settings
from haven.matching.amenities import extract_amenities, normalize_amenity
from haven.models import (
    LearnedPreferences,
    LearnedProfile,
    LegacyListing,
    NYCListing,
    SwipeRecord,
    UserPreferences,
)

logger = structlog.get_logger()

AnyListing = Union[NYCListing, LegacyListing]


def median(values: Sequence[float]) -> float:
    """Mediana; con largo par promedia los dos valores centrales."""
    if not values:
        return 0.0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def _amenity_counts(listings: Iterable[AnyListing]) -> Counter:
    counts: Counter = Counter()
    for listing in listings:
        for amenity in extract_amenities(listing):
            counts[normalize_amenity(amenity)] += 1
    return counts


def learn_from_swipe_history(
    swipe_history: Iterable[SwipeRecord],
    all_listings: Iterable[AnyListing],
) -> LearnedProfile:
    """
    Aprende preferencias a partir de los swipes.

    Los swipes cuyo listing ya no está en el corpus se ignoran. Sin
    ningún like se devuelve un perfil vacío y el scoring cae en su
    modo no personalizado.
    """
    swipes = list(swipe_history)
    liked_ids = {swipe.listing_id for swipe in swipes if swipe.liked}
    disliked_ids = {swipe.listing_id for swipe in swipes if not swipe.liked}

    listings = list(all_listings)
    liked = [listing for listing in listings if listing.id in liked_ids]
    disliked = [listing for listing in listings if listing.id in disliked_ids]

    if not liked:
        return LearnedProfile()

    # Contraste: amenities frecuentes también en dislikes pierden peso
    liked_counts = _amenity_counts(liked)
    disliked_counts = _amenity_counts(disliked)
    preferred_amenities = {}
    for amenity, liked_count in liked_counts.items():
        disliked_count = disliked_counts.get(amenity, 0)
        like_rate = liked_count / (liked_count + disliked_count)
        preferred_amenities[amenity] = like_rate * liked_count

    image_counts = [len(listing.images) for listing in liked]
    description_lengths = [
        len(listing.description) for listing in liked if listing.description
    ]

    sqft_by_bedrooms: dict[int, list[float]] = defaultdict(list)
    for listing in liked:
        if listing.sqft > 0:
            sqft_by_bedrooms[int(listing.bedrooms)].append(listing.sqft)

    profile = LearnedProfile(
        preferred_amenities=preferred_amenities,
        avg_image_count=median(image_counts) if image_counts else None,
        avg_description_length=(
            round(median(description_lengths)) if description_lengths else None
        ),
        avg_sqft_by_bedrooms={
            bedrooms: median(values) for bedrooms, values in sqft_by_bedrooms.items()
        },
    )

    logger.debug(
        "Preferencias aprendidas",
        liked=len(liked),
        disliked=len(disliked),
        amenities=len(preferred_amenities),
    )
    return profile


def calculate_learned_preferences(
    listings: Iterable[AnyListing],
    swipe_history: Iterable[SwipeRecord] = (),
    now: Optional[datetime] = None,
) -> LearnedPreferences:
    """
    Recalcula las preferencias aprendidas en formato de storage.

    Pensado para llamarse periódicamente y guardar el resultado en el
    perfil del usuario.
    """
    profile = learn_from_swipe_history(swipe_history, listings)
    updated_at = (now or datetime.now(timezone.utc)).isoformat()
    return LearnedPreferences.from_profile(profile, updated_at=updated_at)


def should_update_learned_preferences(
    preferences: UserPreferences,
    swipe_count: int,
    min_swipes: Optional[int] = None,
    now: Optional[datetime] = None,
) -> bool:
    """
    Indica si las preferencias aprendidas guardadas deben recalcularse.

    True si todavía no hay nada guardado, False mientras no haya swipes
    suficientes, y True si la copia guardada está vencida.
    """
    settings = get_settings()
    min_swipes = settings.learning_min_swipes if min_swipes is None else min_swipes

    learned = preferences.learned
    if learned is None or not learned.updated_at:
        return True

    if swipe_count < min_swipes:
        return False

    try:
        updated_at = datetime.fromisoformat(learned.updated_at)
    except ValueError:
        return True
    if updated_at.tzinfo is None:
        updated_at = updated_at.replace(tzinfo=timezone.utc)

    now = now or datetime.now(timezone.utc)
    max_age = timedelta(minutes=settings.learned_preferences_max_age_minutes)
    return now - updated_at > max_age
