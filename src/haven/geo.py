"""
Utilidades geográficas: distancia Haversine y tramos de distancia.
"""

from haversine import Unit, haversine

from haven.config import DISTANCE_TIERS, EARTH_RADIUS_MILES


def distance_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Distancia great-circle en millas.

    `haversine` devuelve el ángulo central en radianes y lo escalamos
    con el radio terrestre en millas (3958.8).
    """
    return haversine((lat1, lon1), (lat2, lon2), unit=Unit.RADIANS) * EARTH_RADIUS_MILES


def score_by_distance(miles: float) -> float:
    """
    Score 0-1 por tramos de distancia.

    Corte duro: más de 50 millas vale 0, no hay decaimiento suave.
    """
    for max_miles, score in DISTANCE_TIERS:
        if miles <= max_miles:
            return score
    return 0.0


def format_distance(miles: float) -> str:
    """Label de distancia para la UI."""
    if miles < 1:
        return "< 1 mi"
    if miles < 5:
        return f"{miles:.1f} mi"
    if miles < 15:
        return f"{round(miles)} mi"
    if miles < 50:
        return f"{round(miles)} mi away"
    return f"{round(miles)} mi (far)"
