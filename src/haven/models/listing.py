"""
Modelos de Listing

Conviven dos formatos de anuncio:
- NYCListing: amenities como flags booleanos + categorías (outdoor area, view)
- LegacyListing: formato anterior con amenities como lista de texto libre

Ambos se normalizan a una única lista de amenities con
`haven.matching.amenities.extract_amenities` antes de cualquier scoring.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class AmenityFlags(BaseModel):
    """Amenities binarias de un listing NYC."""

    washer_dryer_in_unit: bool = False
    washer_dryer_in_building: bool = False
    dishwasher: bool = False
    ac: bool = False
    pets: bool = False
    fireplace: bool = False
    gym: bool = False
    parking: bool = False
    pool: bool = False

    # Categóricas: None o "" significa que no tiene
    outdoor_area: Optional[str] = Field(None, description="Ej: Balcony, Terrace, Garden")
    view: Optional[str] = Field(None, description="Ej: City, Water, Park")


class _BaseListing(BaseModel):
    """Campos comunes a ambos formatos."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="ID del listing")
    title: str = Field(default="", description="Título del anuncio")
    address: str = Field(default="", description="Dirección completa")

    price: float = Field(..., ge=0, description="Alquiler mensual en USD")
    bedrooms: float = Field(..., ge=0, description="Dormitorios (0 = studio)")
    bathrooms: float = Field(..., ge=0, description="Baños")
    sqft: float = Field(default=0, ge=0, description="Superficie en pies cuadrados")

    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    images: list[str] = Field(default_factory=list, description="URLs de imágenes")
    description: str = Field(default="", description="Descripción libre")

    average_rating: Optional[float] = Field(
        None, ge=0, le=5, description="Promedio de reseñas (0-5)"
    )
    total_ratings: int = Field(default=0, ge=0, description="Cantidad de reseñas")

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class NYCListing(_BaseListing):
    """Listing con amenities estructuradas y datos del edificio."""

    kind: Literal["nyc"] = "nyc"

    neighborhood: str = Field(default="", description="Barrio")
    year_built: int = Field(..., description="Año de construcción")
    renovation_year: Optional[int] = Field(None, description="Año de la última renovación")

    amenities: AmenityFlags = Field(default_factory=AmenityFlags)


class LegacyListing(_BaseListing):
    """Listing del formato anterior, amenities como texto libre."""

    kind: Literal["legacy"] = "legacy"

    amenities: list[str] = Field(default_factory=list)
    available_from: Optional[str] = Field(None, description="Fecha de disponibilidad ISO")


Listing = Annotated[Union[NYCListing, LegacyListing], Field(discriminator="kind")]

_listing_adapter = TypeAdapter(Listing)


def parse_listing(data: Union[dict, NYCListing, LegacyListing]) -> Union[NYCListing, LegacyListing]:
    """
    Construye un listing desde un dict crudo.

    Si el dict no trae `kind`, se infiere por la forma de `amenities`:
    lista de texto -> legacy, objeto de flags -> nyc.

    Raises:
        pydantic.ValidationError: Si el dict no corresponde a ningún formato
    """
    if isinstance(data, (NYCListing, LegacyListing)):
        return data

    if "kind" not in data:
        amenities = data.get("amenities")
        if isinstance(amenities, list):
            is_legacy = True
        elif isinstance(amenities, dict):
            is_legacy = False
        else:
            is_legacy = "year_built" not in data
        data = {**data, "kind": "legacy" if is_legacy else "nyc"}

    return _listing_adapter.validate_python(data)


def parse_listings(items) -> list[Union[NYCListing, LegacyListing]]:
    """Versión batch de `parse_listing`."""
    return [parse_listing(item) for item in items]
