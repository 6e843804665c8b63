"""
Inferencia con el modelo entrenado.

Forward pass manual (sigmoid(b + x·w)) sin depender del trainer,
normalizando con las stats guardadas en el propio modelo.
"""

import math
from datetime import datetime, timezone
from typing import Optional, Sequence, Union

import structlog
from pydantic import ValidationError

from haven.config import get_settings
from haven.ml.features import FEATURE_NAMES, extract_features
from haven.models import ModelWeights, NYCListing

logger = structlog.get_logger()

NEUTRAL_PROBABILITY = 0.5


def _sigmoid(z: float) -> float:
    if z >= 0:
        return 1.0 / (1.0 + math.exp(-z))
    exp_z = math.exp(z)
    return exp_z / (1.0 + exp_z)


def predict_swipe_likelihood(
    listing: NYCListing,
    model_weights: ModelWeights,
    user_location: Optional[tuple[float, float]] = None,
    current_year: Optional[int] = None,
) -> float:
    """
    Probabilidad de swipe a la derecha (0-1).

    Las predicciones son orientativas: ante cualquier error de
    extracción se devuelve 0.5 en vez de propagar la excepción.
    """
    try:
        vector = extract_features(
            listing, model_weights.feature_stats, user_location, current_year
        )
        logit = model_weights.biases[0]
        for value, weight in zip(vector.features, model_weights.weights, strict=True):
            logit += value * weight[0]
        return _sigmoid(logit)
    except Exception as e:
        logger.warning(
            "Error prediciendo swipe",
            listing_id=getattr(listing, "id", None),
            error=str(e),
        )
        return NEUTRAL_PROBABILITY


def predict_swipe_likelihood_batch(
    listings: Sequence[NYCListing],
    model_weights: ModelWeights,
    user_location: Optional[tuple[float, float]] = None,
    current_year: Optional[int] = None,
) -> list[float]:
    """Versión batch de `predict_swipe_likelihood`."""
    return [
        predict_swipe_likelihood(listing, model_weights, user_location, current_year)
        for listing in listings
    ]


def model_age_days(model_weights: ModelWeights, now: Optional[datetime] = None) -> float:
    """Días desde el entrenamiento. Timestamps sin zona se asumen UTC."""
    trained_at = datetime.fromisoformat(model_weights.trained_at)
    if trained_at.tzinfo is None:
        trained_at = trained_at.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return (now - trained_at).total_seconds() / 86400


def is_model_valid(
    model_weights: Union[ModelWeights, dict, None],
    now: Optional[datetime] = None,
) -> bool:
    """
    Verifica que el modelo esté completo y no sea viejo.

    Un modelo con más de `max_model_age_days` (7) días se considera
    inválido sin importar el resto de los campos.
    """
    if not model_weights:
        return False

    if isinstance(model_weights, dict):
        try:
            model_weights = ModelWeights.model_validate(model_weights)
        except ValidationError:
            return False

    if not model_weights.weights or not model_weights.biases or not model_weights.trained_at:
        return False

    if len(model_weights.weights) != len(FEATURE_NAMES):
        return False

    try:
        age = model_age_days(model_weights, now)
    except ValueError:
        return False

    max_age = get_settings().max_model_age_days
    if age > max_age:
        logger.info("Modelo vencido", age_days=round(age, 1), max_age_days=max_age)
        return False

    return True


def should_retrain_model(
    swipe_count: int,
    model_weights: Optional[ModelWeights],
    now: Optional[datetime] = None,
) -> bool:
    """
    Decide si conviene disparar un reentrenamiento.

    Se reentrena cuando hay swipes suficientes y el modelo falta o
    venció, o cuando el conteo de swipes llega a un múltiplo de
    `retrain_every_swipes`.
    """
    settings = get_settings()
    if swipe_count < settings.training_min_swipes:
        return False
    if not is_model_valid(model_weights, now):
        return True
    return swipe_count % settings.retrain_every_swipes == 0
