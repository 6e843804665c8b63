"""
Filtros hard: descartan listings que no cumplen criterios no negociables.

Se aplican antes del scoring, así el match score siempre es relativo
a un conjunto que el usuario podría aceptar.
"""

from typing import Iterable, Union

import structlog

from haven.matching.amenities import extract_amenities, normalize_amenity
from haven.models import HardFilters, LegacyListing, NYCListing, UserPreferences

logger = structlog.get_logger()

AnyListing = Union[NYCListing, LegacyListing]


def _fuzzy_contains(a: str, b: str) -> bool:
    """Substring sin distinguir mayúsculas, en cualquier dirección."""
    a, b = normalize_amenity(a), normalize_amenity(b)
    return bool(a) and bool(b) and (a in b or b in a)


def passes_price(listing: AnyListing, hard: HardFilters) -> bool:
    if hard.price_min is not None and listing.price < hard.price_min:
        return False
    if hard.price_max is not None and listing.price > hard.price_max:
        return False
    return True


def passes_bedrooms(listing: AnyListing, hard: HardFilters) -> bool:
    return not hard.bedrooms or listing.bedrooms in hard.bedrooms


def passes_bathrooms(listing: AnyListing, hard: HardFilters) -> bool:
    return not hard.bathrooms or listing.bathrooms in hard.bathrooms


def passes_rating(listing: AnyListing, hard: HardFilters) -> bool:
    # Los listings sin rating nunca se excluyen por esta regla
    if listing.average_rating is None:
        return True
    if hard.rating_min is not None and listing.average_rating < hard.rating_min:
        return False
    if hard.rating_max is not None and listing.average_rating > hard.rating_max:
        return False
    return True


def passes_required_amenities(listing: AnyListing, hard: HardFilters) -> bool:
    if not hard.required_amenities:
        return True
    amenities = extract_amenities(listing)
    return all(
        any(_fuzzy_contains(required, amenity) for amenity in amenities)
        for required in hard.required_amenities
    )


def _search_terms(values: list[str]) -> list[str]:
    """Términos en minúsculas; las entradas en blanco no restringen nada."""
    return [term for term in (value.lower().strip() for value in values) if term]


def passes_views(listing: AnyListing, hard: HardFilters) -> bool:
    wanted = _search_terms(hard.views)
    if not wanted or not isinstance(listing, NYCListing):
        return True
    view = (listing.amenities.view or "").lower()
    return bool(view) and any(term in view for term in wanted)


def passes_neighborhoods(listing: AnyListing, hard: HardFilters) -> bool:
    wanted = _search_terms(hard.neighborhoods)
    if not wanted or not isinstance(listing, NYCListing):
        return True
    neighborhood = listing.neighborhood.lower()
    return bool(neighborhood) and any(term in neighborhood for term in wanted)


HARD_FILTER_PREDICATES = (
    passes_price,
    passes_bedrooms,
    passes_bathrooms,
    passes_rating,
    passes_required_amenities,
    passes_views,
    passes_neighborhoods,
)


def passes_hard_filters(listing: AnyListing, hard: HardFilters) -> bool:
    """Conjunción de todos los predicados."""
    return all(predicate(listing, hard) for predicate in HARD_FILTER_PREDICATES)


def apply_hard_filters(
    listings: Iterable[AnyListing],
    preferences: UserPreferences,
) -> list[AnyListing]:
    """
    Devuelve solo los listings que pasan todos los filtros aplicables.

    Un filtro no configurado no impone restricción.
    """
    hard = preferences.hard_filters
    listings = list(listings)
    results = [listing for listing in listings if passes_hard_filters(listing, hard)]

    logger.debug(
        "Filtros hard aplicados",
        total=len(listings),
        kept=len(results),
        excluded=len(listings) - len(results),
    )
    return results
