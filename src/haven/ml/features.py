"""
Extracción de features para el clasificador de swipes.

Convierte un listing NYC en un vector fijo de 18 floats. El orden
es parte del contrato: el predictor indexa los pesos por posición.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

import numpy as np
import structlog

from haven.geo import distance_miles
from haven.models import FeatureStats, Listing, NYCListing, SwipeRecord

logger = structlog.get_logger()

FEATURE_NAMES = [
    "price",
    "bedrooms",
    "bathrooms",
    "sqft",
    "buildingAge",
    "renovationAge",
    "washerDryerInUnit",
    "washerDryerInBuilding",
    "dishwasher",
    "ac",
    "pets",
    "fireplace",
    "gym",
    "parking",
    "pool",
    "hasOutdoorArea",
    "hasView",
    "distanceScore",
]

NUM_FEATURES = len(FEATURE_NAMES)

# Neutral cuando no hay ubicación: ni premia ni castiga
NEUTRAL_DISTANCE_SCORE = 0.5


@dataclass
class FeatureVector:
    """Vector de features + nombres para interpretabilidad."""

    features: list[float]
    feature_names: list[str] = field(default_factory=lambda: list(FEATURE_NAMES))

    def as_array(self) -> np.ndarray:
        return np.asarray(self.features, dtype=np.float64)


def _current_year() -> int:
    return datetime.now(timezone.utc).year


def normalize(value: float, min_value: float, max_value: float) -> float:
    """Min-max a [0, 1]; rango degenerado devuelve 0.5."""
    if max_value == min_value:
        return 0.5
    return (value - min_value) / (max_value - min_value)


def calculate_feature_stats(
    listings: Sequence[Listing], current_year: Optional[int] = None
) -> FeatureStats:
    """
    Calcula los rangos min/max del corpus para normalizar.

    Solo cuentan los listings NYC; los legacy no tienen año de
    construcción y se ignoran.

    La antigüedad de renovación solo considera listings renovados;
    sin ninguno, el rango por defecto es [0, 100].
    """
    year = current_year or _current_year()
    listings = [listing for listing in listings if isinstance(listing, NYCListing)]

    if not listings:
        return FeatureStats(
            price_min=0, price_max=0, sqft_min=0, sqft_max=0, age_min=0, age_max=0
        )

    prices = [listing.price for listing in listings]
    sqfts = [listing.sqft for listing in listings]
    ages = [year - listing.year_built for listing in listings]
    renovation_ages = [
        year - listing.renovation_year for listing in listings if listing.renovation_year
    ]

    return FeatureStats(
        price_min=min(prices),
        price_max=max(prices),
        sqft_min=min(sqfts),
        sqft_max=max(sqfts),
        age_min=min(ages),
        age_max=max(ages),
        renovation_age_min=min(renovation_ages) if renovation_ages else 0,
        renovation_age_max=max(renovation_ages) if renovation_ages else 100,
    )


def extract_features(
    listing: NYCListing,
    stats: FeatureStats,
    user_location: Optional[tuple[float, float]] = None,
    current_year: Optional[int] = None,
) -> FeatureVector:
    """
    Extrae el vector de 18 features de un listing.

    Args:
        listing: Listing NYC
        stats: Rangos de normalización (del corpus o los guardados en el modelo)
        user_location: (lat, lng) del usuario, opcional
        current_year: Año de referencia para antigüedades (default: año actual)

    Returns:
        FeatureVector con las features en el orden de FEATURE_NAMES
    """
    year = current_year or _current_year()
    building_age = year - listing.year_built
    # Nunca renovado: se asume la máxima antigüedad de renovación del corpus
    renovation_age = (
        year - listing.renovation_year if listing.renovation_year else stats.renovation_age_max
    )

    distance_score = NEUTRAL_DISTANCE_SCORE
    if user_location is not None and listing.has_coordinates:
        miles = distance_miles(
            user_location[0], user_location[1], listing.latitude, listing.longitude
        )
        distance_score = math.exp(-miles / 10)

    amenities = listing.amenities
    features = [
        # Continuas, normalizadas a [0, 1]
        normalize(listing.price, stats.price_min, stats.price_max),
        normalize(min(listing.bedrooms, 4), 0, 4),
        normalize(min(listing.bathrooms, 4), 0, 4),
        normalize(listing.sqft, stats.sqft_min, stats.sqft_max),
        normalize(building_age, stats.age_min, stats.age_max),
        normalize(renovation_age, stats.renovation_age_min, stats.renovation_age_max),
        # Binarias
        float(amenities.washer_dryer_in_unit),
        float(amenities.washer_dryer_in_building),
        float(amenities.dishwasher),
        float(amenities.ac),
        float(amenities.pets),
        float(amenities.fireplace),
        float(amenities.gym),
        float(amenities.parking),
        float(amenities.pool),
        # Categóricas como binarias
        1.0 if amenities.outdoor_area else 0.0,
        1.0 if amenities.view else 0.0,
        distance_score,
    ]

    return FeatureVector(features=features)


def prepare_training_data(
    listings: Iterable[NYCListing],
    swipe_history: Iterable[SwipeRecord],
    stats: FeatureStats,
    user_location: Optional[tuple[float, float]] = None,
    current_year: Optional[int] = None,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Arma la matriz X (N x 18) y las etiquetas y (N x 1) desde los swipes.

    Los swipes cuyo listing ya no existe en el corpus se descartan.
    """
    by_id = {listing.id: listing for listing in listings}
    rows: list[list[float]] = []
    labels: list[float] = []
    skipped = 0

    for swipe in swipe_history:
        listing = by_id.get(swipe.listing_id)
        if listing is None:
            skipped += 1
            continue
        vector = extract_features(listing, stats, user_location, current_year)
        rows.append(vector.features)
        labels.append(1.0 if swipe.liked else 0.0)

    if skipped:
        logger.debug("Swipes sin listing en el corpus", skipped=skipped)

    X = np.asarray(rows, dtype=np.float64).reshape(len(rows), NUM_FEATURES)
    y = np.asarray(labels, dtype=np.float64).reshape(len(labels), 1)
    return X, y
