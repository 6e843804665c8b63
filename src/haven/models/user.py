"""
Modelo de Preferencias de Usuario

Define las preferencias del usuario para el ranking, incluyendo
filtros hard (excluyentes), pesos del score y el estado aprendido
a partir de los swipes (preferencias aprendidas y modelo entrenado).
"""

from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from haven.models.ml import ModelWeights


class SwipeRecord(BaseModel):
    """Un swipe del usuario. Log append-only, nunca se modifica."""

    model_config = ConfigDict(frozen=True)

    listing_id: str = Field(..., description="ID del listing swipeado")
    liked: bool = Field(..., description="True = swipe a la derecha")


class ScoringWeights(BaseModel):
    """
    Pesos porcentuales de cada factor del score.

    Deberían sumar 100, pero el motor renormaliza por el peso
    efectivamente acumulado, así que no es obligatorio.
    """

    distance: float = Field(default=30.0, ge=0)
    amenities: float = Field(default=30.0, ge=0)
    property_features: float = Field(default=20.0, ge=0)
    quality: float = Field(default=15.0, ge=0)
    rating: float = Field(default=5.0, ge=0)


class HardFilters(BaseModel):
    """
    Filtros excluyentes: si un listing no cumple, se descarta.
    Un filtro vacío o None no impone ninguna restricción.
    """

    # Precio (inclusivo)
    price_min: Optional[float] = Field(None, ge=0, description="Alquiler mínimo")
    price_max: Optional[float] = Field(None, ge=0, description="Alquiler máximo")

    # Allow-lists exactas, no rangos
    bedrooms: list[int] = Field(default_factory=list, description="Dormitorios aceptables")
    bathrooms: list[float] = Field(default_factory=list, description="Baños aceptables")

    # Solo aplica a listings con rating
    rating_min: Optional[float] = Field(None, ge=0, le=5)
    rating_max: Optional[float] = Field(None, ge=0, le=5)

    # Must-have (match difuso por substring)
    required_amenities: list[str] = Field(default_factory=list)
    views: list[str] = Field(default_factory=list, description="Vistas aceptables (solo NYC)")
    neighborhoods: list[str] = Field(
        default_factory=list, description="Barrios aceptables (solo NYC)"
    )


@dataclass(frozen=True)
class LearnedProfile:
    """
    Representación interna de las preferencias aprendidas.

    Usa dicts como hash maps para lookups O(1); nunca se persiste
    directamente, ver `LearnedPreferences` para el formato de storage.
    """

    preferred_amenities: dict[str, float] = field(default_factory=dict)
    avg_image_count: Optional[float] = None
    avg_description_length: Optional[float] = None
    avg_sqft_by_bedrooms: dict[int, float] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return (
            not self.preferred_amenities
            and self.avg_image_count is None
            and self.avg_description_length is None
            and not self.avg_sqft_by_bedrooms
        )

    @classmethod
    def from_stored(cls, stored: "LearnedPreferences") -> "LearnedProfile":
        """Convierte el formato de storage al formato interno."""
        sqft_by_bedrooms = {}
        for key, value in (stored.avg_sqft_by_bedrooms or {}).items():
            try:
                sqft_by_bedrooms[int(float(key))] = value
            except (ValueError, OverflowError):
                # "nan" da ValueError, "inf" da OverflowError: se ignora la clave
                continue

        return cls(
            preferred_amenities=dict(stored.preferred_amenities or {}),
            avg_image_count=stored.avg_image_count,
            avg_description_length=stored.avg_description_length,
            avg_sqft_by_bedrooms=sqft_by_bedrooms,
        )


class LearnedPreferences(BaseModel):
    """
    Preferencias aprendidas en formato de storage (JSONB).

    Es un cache derivado: siempre se puede reconstruir desde el
    historial de swipes + el corpus de listings.
    """

    preferred_amenities: Optional[dict[str, float]] = Field(
        None, description="Amenity normalizada -> peso"
    )
    avg_image_count: Optional[float] = Field(None, description="Mediana de fotos en likes")
    avg_description_length: Optional[float] = Field(
        None, description="Mediana del largo de descripción en likes"
    )
    avg_sqft_by_bedrooms: Optional[dict[str, float]] = Field(
        None, description="Dormitorios -> mediana de sqft en likes"
    )
    updated_at: Optional[str] = Field(None, description="Timestamp ISO de la última actualización")

    @classmethod
    def from_profile(
        cls, profile: LearnedProfile, updated_at: Optional[str] = None
    ) -> "LearnedPreferences":
        """Convierte el formato interno al formato de storage."""
        return cls(
            preferred_amenities=dict(profile.preferred_amenities) or None,
            avg_image_count=profile.avg_image_count,
            avg_description_length=profile.avg_description_length,
            avg_sqft_by_bedrooms={
                str(bedrooms): sqft
                for bedrooms, sqft in sorted(profile.avg_sqft_by_bedrooms.items())
            }
            or None,
            updated_at=updated_at,
        )

    def to_db_dict(self) -> dict:
        """Convierte a diccionario para guardar en el perfil del usuario."""
        return self.model_dump(exclude_none=True)


class UserPreferences(BaseModel):
    """Todo lo que el perfil del usuario aporta al ranking."""

    # Ubicación preferida (trabajo, barrio buscado, etc.)
    address: Optional[str] = Field(None, description="Dirección de referencia")
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    hard_filters: HardFilters = Field(default_factory=HardFilters)
    weights: Optional[ScoringWeights] = Field(
        None, description="Pesos personalizados (None = defaults de config)"
    )

    # Estado derivado de los swipes, persistido por el perfil
    learned: Optional[LearnedPreferences] = None
    trained_model: Optional[ModelWeights] = None

    @property
    def location(self) -> Optional[tuple[float, float]]:
        """(lat, lng) si la ubicación está completa."""
        if self.latitude is None or self.longitude is None:
            return None
        return (self.latitude, self.longitude)
