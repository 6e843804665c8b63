"""
Configuración centralizada del motor de recomendación.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from haven.models.user import ScoringWeights

# config.py -> haven/ -> src/ -> raíz del proyecto (donde está el .env)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Configuración principal del motor."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Pesos por defecto del score (porcentajes, suman 100)
    weight_distance: float = Field(30.0, ge=0, description="Peso de la distancia")
    weight_amenities: float = Field(30.0, ge=0, description="Peso de amenities aprendidas")
    weight_property_features: float = Field(
        20.0, ge=0, description="Peso de sqft / antigüedad / renovación"
    )
    weight_quality: float = Field(15.0, ge=0, description="Peso de fotos y descripción")
    weight_rating: float = Field(5.0, ge=0, description="Peso del rating de reseñas")

    # Ranking
    top_pick_threshold: float = Field(
        80.0, ge=0, le=100, description="Score mínimo para marcar un listing como top pick"
    )

    # Aprendizaje de preferencias
    learning_min_swipes: int = Field(
        5, ge=1, description="Swipes necesarios antes de recalcular preferencias aprendidas"
    )
    learned_preferences_max_age_minutes: int = Field(
        60, ge=1, description="Antigüedad máxima de las preferencias aprendidas guardadas"
    )

    # Entrenamiento del modelo
    training_min_swipes: int = Field(5, ge=1, description="Swipes mínimos para entrenar")
    training_epochs: int = Field(100, ge=1, description="Épocas de entrenamiento")
    training_learning_rate: float = Field(0.01, gt=0, description="Learning rate de Adam")
    training_max_batch_size: int = Field(32, ge=1, description="Tamaño máximo de batch")
    training_validation_split: float = Field(
        0.2, ge=0.0, lt=1.0, description="Fracción reservada para validación"
    )
    training_min_validation_examples: int = Field(
        20, ge=1, description="Ejemplos necesarios para usar validación"
    )
    training_seed: Optional[int] = Field(
        None, description="Semilla del generador aleatorio (None = no determinístico)"
    )

    # Validez del modelo
    max_model_age_days: float = Field(
        7.0, gt=0, description="Días después de los cuales un modelo se considera viejo"
    )
    retrain_every_swipes: int = Field(
        10, ge=1, description="Reentrenar cada N swipes aunque el modelo siga vigente"
    )

    # Logging
    log_level: str = Field("INFO", description="Nivel de logging")

    def default_scoring_weights(self) -> ScoringWeights:
        """Pesos de scoring configurados por entorno."""
        return ScoringWeights(
            distance=self.weight_distance,
            amenities=self.weight_amenities,
            property_features=self.weight_property_features,
            quality=self.weight_quality,
            rating=self.weight_rating,
        )


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración cacheada."""
    return Settings()


# Constantes del sistema
EARTH_RADIUS_MILES = 3958.8

# (distancia máxima en millas, score) - más allá del último tramo el score es 0
DISTANCE_TIERS = [
    (5.0, 1.0),
    (15.0, 0.8),
    (30.0, 0.5),
    (50.0, 0.2),
]

SCORING_CATEGORIES = [
    "distance",
    "amenities",
    "property_features",
    "quality",
    "rating",
]
