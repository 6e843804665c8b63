"""
Entrenamiento del clasificador de swipes.

Regresión logística de una sola capa (18 -> 1, sigmoid) entrenada con
binary cross-entropy y Adam, escrita directamente sobre numpy.
Se reentrena desde cero cada vez; no hay actualización incremental.
"""

from datetime import datetime, timezone
from typing import Optional, Sequence

import numpy as np
import structlog

from haven.config import get_settings
from haven.ml.features import calculate_feature_stats, prepare_training_data
from haven.models import ModelWeights, NYCListing, SwipeRecord, TrainingResult

logger = structlog.get_logger()

INSUFFICIENT_DATA_ERROR = "Insufficient training data. Need at least {min_swipes} swipes."
SINGLE_CLASS_ERROR = "Need examples of both liked and disliked apartments."
NO_EXAMPLES_ERROR = "No valid training examples found."

# Evita log(0) en la pérdida
_EPSILON = 1e-7


def _sigmoid(z: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-np.clip(z, -500, 500)))


def _binary_cross_entropy(probs: np.ndarray, y: np.ndarray) -> float:
    p = np.clip(probs, _EPSILON, 1 - _EPSILON)
    return float(-np.mean(y * np.log(p) + (1 - y) * np.log(1 - p)))


def _accuracy(probs: np.ndarray, y: np.ndarray) -> float:
    if len(y) == 0:
        return 0.0
    return float(np.mean((probs >= 0.5) == (y >= 0.5)))


class LogisticRegressionTrainer:
    """
    Regresión logística con Adam y mini-batches.

    Inicialización Glorot normal truncada para el kernel y bias en cero.
    """

    def __init__(
        self,
        epochs: int = 100,
        learning_rate: float = 0.01,
        max_batch_size: int = 32,
        validation_split: float = 0.2,
        min_validation_examples: int = 20,
        beta1: float = 0.9,
        beta2: float = 0.999,
        seed: Optional[int] = None,
    ):
        self.epochs = epochs
        self.learning_rate = learning_rate
        self.max_batch_size = max_batch_size
        self.validation_split = validation_split
        self.min_validation_examples = min_validation_examples
        self.beta1 = beta1
        self.beta2 = beta2
        self.rng = np.random.default_rng(seed)

    @classmethod
    def from_settings(cls) -> "LogisticRegressionTrainer":
        settings = get_settings()
        return cls(
            epochs=settings.training_epochs,
            learning_rate=settings.training_learning_rate,
            max_batch_size=settings.training_max_batch_size,
            validation_split=settings.training_validation_split,
            min_validation_examples=settings.training_min_validation_examples,
            seed=settings.training_seed,
        )

    def _glorot_normal(self, fan_in: int, fan_out: int) -> np.ndarray:
        """Normal truncada a 2 desvíos con std = sqrt(2 / (fan_in + fan_out))."""
        std = np.sqrt(2.0 / (fan_in + fan_out))
        values = self.rng.normal(0.0, std, size=(fan_in, fan_out))
        out_of_range = np.abs(values) > 2 * std
        while out_of_range.any():
            values[out_of_range] = self.rng.normal(0.0, std, size=int(out_of_range.sum()))
            out_of_range = np.abs(values) > 2 * std
        return values

    def _split(self, X: np.ndarray, y: np.ndarray):
        """Reserva el último tramo para validación, solo con suficientes ejemplos."""
        n = len(X)
        if n < self.min_validation_examples or self.validation_split <= 0:
            return X, y, None, None
        split_at = int(np.floor(n * (1 - self.validation_split)))
        return X[:split_at], y[:split_at], X[split_at:], y[split_at:]

    def fit(self, X: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray, float]:
        """
        Entrena sobre X (N x F) e y (N x 1).

        Returns:
            (kernel F x 1, bias (1,), accuracy final sobre el set de training)
        """
        X_train, y_train, X_val, y_val = self._split(X, y)
        n, n_features = X_train.shape
        batch_size = min(self.max_batch_size, n)

        W = self._glorot_normal(n_features, 1)
        b = np.zeros(1)

        # Momentos de Adam
        m_W, v_W = np.zeros_like(W), np.zeros_like(W)
        m_b, v_b = np.zeros_like(b), np.zeros_like(b)
        step = 0

        for epoch in range(self.epochs):
            order = self.rng.permutation(n)
            for start in range(0, n, batch_size):
                idx = order[start:start + batch_size]
                xb, yb = X_train[idx], y_train[idx]

                probs = _sigmoid(xb @ W + b)
                error = probs - yb
                grad_W = xb.T @ error / len(idx)
                grad_b = error.mean(axis=0)

                step += 1
                m_W = self.beta1 * m_W + (1 - self.beta1) * grad_W
                v_W = self.beta2 * v_W + (1 - self.beta2) * grad_W ** 2
                m_b = self.beta1 * m_b + (1 - self.beta1) * grad_b
                v_b = self.beta2 * v_b + (1 - self.beta2) * grad_b ** 2

                correction1 = 1 - self.beta1 ** step
                correction2 = 1 - self.beta2 ** step
                W -= self.learning_rate * (m_W / correction1) / (np.sqrt(v_W / correction2) + _EPSILON)
                b -= self.learning_rate * (m_b / correction1) / (np.sqrt(v_b / correction2) + _EPSILON)

            if epoch % 20 == 0:
                probs = _sigmoid(X_train @ W + b)
                logger.debug(
                    "Epoch de entrenamiento",
                    epoch=epoch,
                    loss=round(_binary_cross_entropy(probs, y_train), 4),
                    acc=round(_accuracy(probs, y_train), 4),
                )

        final_accuracy = _accuracy(_sigmoid(X_train @ W + b), y_train)

        if X_val is not None and len(X_val):
            logger.debug(
                "Validación",
                val_acc=round(_accuracy(_sigmoid(X_val @ W + b), y_val), 4),
                val_size=len(X_val),
            )

        return W, b, final_accuracy


def train_model(
    listings: Sequence[NYCListing],
    swipe_history: Sequence[SwipeRecord],
    user_location: Optional[tuple[float, float]] = None,
    trainer: Optional[LogisticRegressionTrainer] = None,
    current_year: Optional[int] = None,
) -> TrainingResult:
    """
    Entrena el modelo a partir del historial de swipes.

    Las precondiciones no se cumplen con excepciones sino con un
    TrainingResult(success=False) con un mensaje para mostrar.

    Args:
        listings: Corpus completo de listings NYC
        swipe_history: Swipes del usuario
        user_location: (lat, lng) del usuario para la feature de distancia
        trainer: Trainer a usar (default: configurado por settings)
        current_year: Año de referencia para antigüedades

    Returns:
        TrainingResult con ModelWeights si el entrenamiento fue exitoso
    """
    min_swipes = get_settings().training_min_swipes

    if len(swipe_history) < min_swipes:
        return TrainingResult(
            success=False,
            error=INSUFFICIENT_DATA_ERROR.format(min_swipes=min_swipes),
        )

    likes = sum(1 for swipe in swipe_history if swipe.liked)
    dislikes = len(swipe_history) - likes
    if likes == 0 or dislikes == 0:
        return TrainingResult(success=False, error=SINGLE_CLASS_ERROR)

    logger.info(
        "Entrenando modelo",
        examples=len(swipe_history),
        likes=likes,
        dislikes=dislikes,
    )

    try:
        # Solo los listings NYC tienen los datos del edificio que usan las features
        corpus = [listing for listing in listings if isinstance(listing, NYCListing)]
        stats = calculate_feature_stats(corpus, current_year=current_year)
        X, y = prepare_training_data(corpus, swipe_history, stats, user_location, current_year)

        if len(X) == 0:
            return TrainingResult(success=False, error=NO_EXAMPLES_ERROR)

        trainer = trainer or LogisticRegressionTrainer.from_settings()
        kernel, bias, accuracy = trainer.fit(X, y)
    except Exception as e:
        logger.error("Error entrenando modelo", error=str(e))
        return TrainingResult(success=False, error=str(e) or "Unknown training error")

    logger.info("Entrenamiento completo", accuracy=round(accuracy, 4), training_size=len(X))

    weights = ModelWeights(
        weights=[[float(w)] for w in kernel[:, 0]],
        biases=[float(v) for v in bias],
        feature_stats=stats,
        trained_at=datetime.now(timezone.utc).isoformat(),
        training_size=len(X),
        accuracy=accuracy,
    )
    return TrainingResult(success=True, weights=weights, accuracy=accuracy)
