"""
Sugerencia de pesos de scoring a partir del modelo entrenado.

Las magnitudes de los pesos de la regresión se agrupan por categoría
de scoring y se convierten en porcentajes que suman exactamente 100.
"""

import math

import structlog

from haven.config import SCORING_CATEGORIES
from haven.ml.features import FEATURE_NAMES
from haven.models import ModelWeights, SuggestedWeights

logger = structlog.get_logger()

# Índices de FEATURE_NAMES por categoría
QUALITY_FEATURES = slice(0, 3)  # price, bedrooms, bathrooms
PROPERTY_FEATURES = slice(3, 6)  # sqft, buildingAge, renovationAge
AMENITY_FEATURES = slice(6, 17)  # 9 flags + outdoor area + view
DISTANCE_FEATURE = 17

# El rating no tiene feature propia: se estima como fracción de la mayor importancia
RATING_IMPORTANCE_FACTOR = 0.3
TIE_CONFIDENCE_FACTOR = 0.7
CONFIDENCE_FULL_TRAINING_SIZE = 50


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _round_to_five(value: float) -> int:
    """Redondeo al múltiplo de 5 más cercano (mitades hacia arriba)."""
    return int(math.floor(value / 5 + 0.5) * 5)


def feature_importances(model_weights: ModelWeights) -> list[tuple[str, float]]:
    """Pesos del modelo por feature, ordenados por magnitud descendente."""
    pairs = [(name, row[0]) for name, row in zip(FEATURE_NAMES, model_weights.weights)]
    return sorted(pairs, key=lambda pair: abs(pair[1]), reverse=True)


def suggest_scoring_weights(model_weights: ModelWeights) -> SuggestedWeights:
    """
    Redistribución de pesos sugerida por el modelo.

    Se promedia (no se suma) la importancia dentro de cada grupo para
    no favorecer a los grupos con más features. El resultado se redondea
    a múltiplos de 5 y el desvío del redondeo se suma a la categoría
    más grande, así que siempre suma 100.
    """
    importances = [abs(row[0]) for row in model_weights.weights]
    importances += [0.0] * (len(FEATURE_NAMES) - len(importances))

    group_importance = {
        "distance": importances[DISTANCE_FEATURE],
        "amenities": _mean(importances[AMENITY_FEATURES]),
        "property_features": _mean(importances[PROPERTY_FEATURES]),
        "quality": _mean(importances[QUALITY_FEATURES]),
        "rating": max(importances) * RATING_IMPORTANCE_FACTOR,
    }

    total = sum(group_importance.values())
    if total > 0:
        rounded = {
            category: _round_to_five(group_importance[category] / total * 100)
            for category in SCORING_CATEGORIES
        }
    else:
        # Modelo sin señal: distribución plana
        rounded = {category: 100 // len(SCORING_CATEGORIES) for category in SCORING_CATEGORIES}

    drift = 100 - sum(rounded.values())
    if drift:
        largest = max(SCORING_CATEGORIES, key=lambda category: rounded[category])
        rounded[largest] += drift

    max_weight = max(rounded.values())
    top = [category for category in SCORING_CATEGORIES if rounded[category] == max_weight]
    if len(top) == 1:
        top_priority = top[0]
    elif "amenities" in top:
        top_priority = "amenities"
    else:
        top_priority = top[0]

    # Sin accuracy (o accuracy 0) se asume azar
    accuracy = model_weights.accuracy or 0.5
    tie_factor = TIE_CONFIDENCE_FACTOR if len(top) > 1 else 1.0
    confidence = min(model_weights.training_size / CONFIDENCE_FULL_TRAINING_SIZE, 1.0) * accuracy * tie_factor
    confidence = max(0.0, min(confidence, 1.0))

    logger.debug(
        "Pesos sugeridos",
        weights=rounded,
        top_priority=top_priority,
        tied_with=top if len(top) > 1 else None,
        confidence=round(confidence, 2),
    )

    return SuggestedWeights(
        **rounded,
        top_priority=top_priority,
        confidence=confidence,
    )
