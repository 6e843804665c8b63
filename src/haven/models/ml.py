"""
Modelos del clasificador de swipes.

ModelWeights es un valor inmutable: se reemplaza completo en cada
reentrenamiento y nunca se modifica en el lugar.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ScoringCategory = Literal["distance", "amenities", "property_features", "quality", "rating"]


class FeatureStats(BaseModel):
    """Rangos min/max del corpus usados para normalizar features."""

    model_config = ConfigDict(frozen=True)

    price_min: float
    price_max: float
    sqft_min: float
    sqft_max: float
    age_min: float
    age_max: float
    renovation_age_min: float = 0.0
    renovation_age_max: float = 100.0


class ModelWeights(BaseModel):
    """Estado completo de la regresión logística entrenada."""

    model_config = ConfigDict(frozen=True)

    weights: list[list[float]] = Field(..., description="Kernel de la capa densa (18x1)")
    biases: list[float] = Field(..., description="Bias de la capa densa")
    feature_stats: FeatureStats = Field(..., description="Stats usadas al entrenar")
    trained_at: str = Field(..., description="Timestamp ISO del entrenamiento")
    training_size: int = Field(..., ge=0, description="Ejemplos usados")
    accuracy: Optional[float] = Field(None, ge=0, le=1, description="Accuracy final de training")


class TrainingResult(BaseModel):
    """Resultado del entrenamiento: pesos o un mensaje de error."""

    success: bool
    weights: Optional[ModelWeights] = None
    accuracy: Optional[float] = None
    error: Optional[str] = None


class SuggestedWeights(BaseModel):
    """Redistribución de pesos sugerida a partir de un modelo entrenado."""

    distance: int
    amenities: int
    property_features: int
    quality: int
    rating: int
    top_priority: ScoringCategory
    confidence: float = Field(..., ge=0, le=1)

    def as_scoring_weights(self):
        from haven.models.user import ScoringWeights

        return ScoringWeights(
            distance=self.distance,
            amenities=self.amenities,
            property_features=self.property_features,
            quality=self.quality,
            rating=self.rating,
        )
