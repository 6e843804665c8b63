"""
Script para rankear listings para un usuario.

Lee el corpus, las preferencias y el historial de swipes desde JSON,
imprime el ranking con el desglose por factor y opcionalmente guarda
las preferencias aprendidas recalculadas.

Uso:
    python -m haven.scripts.run_ranking --listings listings.json
    python -m haven.scripts.run_ranking --listings listings.json --preferences prefs.json --swipes swipes.json
    python -m haven.scripts.run_ranking --listings listings.json --swipes swipes.json --learned-output learned.json
"""

import argparse
import json
import logging
import sys
from typing import Optional

import structlog

from haven.config import get_settings
from haven.matching import (
    RankedListing,
    RankingEngine,
    calculate_learned_preferences,
    should_update_learned_preferences,
)
from haven.scripts.inputs import load_listings, load_preferences, load_swipes

# Configurar logging
settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(message)s",
    force=True,
)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

FACTORS = ("distance", "amenities", "property_features", "quality", "rating")


def format_ranked(position: int, ranked: RankedListing) -> str:
    listing = ranked.listing
    star = " ⭐" if ranked.is_top_pick else ""
    lines = [
        f"{position:>3}. [{ranked.match_score:5.1f}]{star} {listing.title or listing.id}"
        f" - ${listing.price:,.0f}"
    ]
    for name in FACTORS:
        factor = getattr(ranked.score_breakdown, name)
        if factor is not None:
            lines.append(f"       {name:<18} {factor.percentage:5.1f}%  {factor.label}")
    return "\n".join(lines)


def run_ranking(
    listings_path: str,
    preferences_path: Optional[str] = None,
    swipes_path: Optional[str] = None,
    limit: int = 20,
    learned_output: Optional[str] = None,
) -> list[RankedListing]:
    """
    Ejecuta el ranking.

    Args:
        listings_path: JSON con el corpus de listings
        preferences_path: JSON con las preferencias (None = cold start)
        swipes_path: JSON con el historial de swipes
        limit: Máximo de resultados a imprimir
        learned_output: Si se indica, guarda ahí las preferencias aprendidas
    """
    listings = load_listings(listings_path)
    preferences = load_preferences(preferences_path)
    swipes = load_swipes(swipes_path)

    logger.info(
        "Iniciando ranking",
        listings=len(listings),
        swipes=len(swipes),
        has_location=preferences.location is not None,
    )

    if learned_output and should_update_learned_preferences(preferences, len(swipes)):
        learned = calculate_learned_preferences(listings, swipes)
        with open(learned_output, "w", encoding="utf-8") as f:
            json.dump(learned.to_db_dict(), f, indent=2, ensure_ascii=False)
        logger.info("Preferencias aprendidas guardadas", path=learned_output)
        preferences = preferences.model_copy(update={"learned": learned})

    ranked = RankingEngine().rank_listings(listings, preferences, swipes)

    for position, item in enumerate(ranked[:limit], start=1):
        print(format_ranked(position, item))

    return ranked


def main():
    """Entry point del script."""
    parser = argparse.ArgumentParser(description="Ranking de departamentos para un usuario")
    parser.add_argument("--listings", type=str, required=True, help="JSON con los listings")
    parser.add_argument("--preferences", type=str, default=None, help="JSON con las preferencias")
    parser.add_argument("--swipes", type=str, default=None, help="JSON con el historial de swipes")
    parser.add_argument("--limit", type=int, default=20, help="Máximo de resultados a mostrar")
    parser.add_argument(
        "--learned-output",
        type=str,
        default=None,
        help="Archivo donde guardar las preferencias aprendidas recalculadas",
    )

    args = parser.parse_args()

    try:
        ranked = run_ranking(
            listings_path=args.listings,
            preferences_path=args.preferences,
            swipes_path=args.swipes,
            limit=args.limit,
            learned_output=args.learned_output,
        )
        logger.info(
            "Ranking completado",
            results=len(ranked),
            top_picks=sum(1 for r in ranked if r.is_top_pick),
        )
        sys.exit(0)

    except KeyboardInterrupt:
        logger.info("Ranking interrumpido por usuario")
        sys.exit(130)
    except (OSError, ValueError) as e:
        logger.error("Error leyendo archivos de entrada", error=str(e))
        sys.exit(1)
    except Exception as e:
        logger.error("Error fatal en ranking", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
