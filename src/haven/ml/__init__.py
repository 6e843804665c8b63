"""
Clasificador de swipes.

Extracción de features, entrenamiento de la regresión logística,
inferencia y sugerencia de pesos de scoring.
"""

from haven.ml.features import (
    FEATURE_NAMES,
    FeatureVector,
    calculate_feature_stats,
    extract_features,
    prepare_training_data,
)
from haven.ml.trainer import LogisticRegressionTrainer, train_model
from haven.ml.predictor import (
    is_model_valid,
    predict_swipe_likelihood,
    predict_swipe_likelihood_batch,
    should_retrain_model,
)
from haven.ml.weights import feature_importances, suggest_scoring_weights

__all__ = [
    # Features
    "FEATURE_NAMES",
    "FeatureVector",
    "calculate_feature_stats",
    "extract_features",
    "prepare_training_data",
    # Entrenamiento
    "LogisticRegressionTrainer",
    "train_model",
    # Inferencia
    "is_model_valid",
    "predict_swipe_likelihood",
    "predict_swipe_likelihood_batch",
    "should_retrain_model",
    # Pesos
    "feature_importances",
    "suggest_scoring_weights",
]
