"""
Carga de archivos JSON de entrada para los scripts.

Formatos:
- listings: array de listings (NYC o legacy, `kind` opcional)
- preferencias: objeto UserPreferences
- swipes: array de {"listing_id": ..., "liked": ...}
"""

import json
from pathlib import Path
from typing import Optional, Union

from pydantic import TypeAdapter

from haven.models import (
    LegacyListing,
    NYCListing,
    SwipeRecord,
    UserPreferences,
    parse_listings,
)

_swipes_adapter = TypeAdapter(list[SwipeRecord])


def _read_json(path: Union[str, Path]):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def load_listings(path: Union[str, Path]) -> list[Union[NYCListing, LegacyListing]]:
    """
    Raises:
        pydantic.ValidationError: Si algún listing no es válido
    """
    data = _read_json(path)
    if not isinstance(data, list):
        raise ValueError(f"Se esperaba un array de listings en {path}")
    return parse_listings(data)


def load_preferences(path: Optional[Union[str, Path]]) -> UserPreferences:
    """Sin archivo se usan preferencias vacías (cold start)."""
    if path is None:
        return UserPreferences()
    return UserPreferences.model_validate(_read_json(path))


def load_swipes(path: Optional[Union[str, Path]]) -> list[SwipeRecord]:
    if path is None:
        return []
    return _swipes_adapter.validate_python(_read_json(path))
