"""
Script para entrenar el clasificador de swipes de un usuario.

Entrena la regresión logística con el historial de swipes, muestra
las features más influyentes y la redistribución de pesos sugerida,
y opcionalmente guarda el modelo en JSON.

Uso:
    python -m haven.scripts.run_training --listings listings.json --swipes swipes.json
    python -m haven.scripts.run_training --listings listings.json --swipes swipes.json --output model.json
    python -m haven.scripts.run_training --listings listings.json --swipes swipes.json --preferences prefs.json --force
"""

import argparse
import logging
import sys
from typing import Optional

import structlog

from haven.config import get_settings
from haven.ml import (
    LogisticRegressionTrainer,
    feature_importances,
    should_retrain_model,
    suggest_scoring_weights,
    train_model,
)
from haven.models import TrainingResult
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


def run_training(
    listings_path: str,
    swipes_path: str,
    preferences_path: Optional[str] = None,
    output: Optional[str] = None,
    seed: Optional[int] = None,
    force: bool = False,
    top_features: int = 5,
) -> Optional[TrainingResult]:
    """
    Ejecuta el entrenamiento.

    Args:
        listings_path: JSON con el corpus de listings
        swipes_path: JSON con el historial de swipes
        preferences_path: JSON con las preferencias (ubicación y modelo previo)
        output: Archivo donde guardar el modelo entrenado
        seed: Semilla para un entrenamiento reproducible
        force: Entrenar aunque el modelo guardado siga vigente
        top_features: Cantidad de features a mostrar

    Returns:
        TrainingResult, o None si no hacía falta reentrenar
    """
    listings = load_listings(listings_path)
    swipes = load_swipes(swipes_path)
    preferences = load_preferences(preferences_path)

    if not force and preferences.trained_model is not None:
        if not should_retrain_model(len(swipes), preferences.trained_model):
            logger.info("El modelo guardado sigue vigente, no se reentrena", swipes=len(swipes))
            return None

    trainer = LogisticRegressionTrainer.from_settings()
    if seed is not None:
        trainer = LogisticRegressionTrainer(
            epochs=trainer.epochs,
            learning_rate=trainer.learning_rate,
            max_batch_size=trainer.max_batch_size,
            validation_split=trainer.validation_split,
            min_validation_examples=trainer.min_validation_examples,
            seed=seed,
        )

    result = train_model(listings, swipes, preferences.location, trainer=trainer)
    if not result.success:
        logger.warning("No se pudo entrenar", error=result.error)
        return result

    model = result.weights
    print(f"Accuracy: {result.accuracy:.1%} ({model.training_size} ejemplos)")

    print("Features más influyentes:")
    for name, weight in feature_importances(model)[:top_features]:
        print(f"  {name:<24} {weight:+.3f}")

    suggested = suggest_scoring_weights(model)
    print(
        "Pesos sugeridos: "
        f"distance={suggested.distance} amenities={suggested.amenities} "
        f"property_features={suggested.property_features} quality={suggested.quality} "
        f"rating={suggested.rating}"
    )
    print(f"Prioridad: {suggested.top_priority} (confianza {suggested.confidence:.0%})")

    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(model.model_dump_json(indent=2))
        logger.info("Modelo guardado", path=output)

    return result


def main():
    """Entry point del script."""
    parser = argparse.ArgumentParser(description="Entrenamiento del clasificador de swipes")
    parser.add_argument("--listings", type=str, required=True, help="JSON con los listings")
    parser.add_argument("--swipes", type=str, required=True, help="JSON con el historial de swipes")
    parser.add_argument(
        "--preferences",
        type=str,
        default=None,
        help="JSON con las preferencias (ubicación y modelo previo)",
    )
    parser.add_argument("--output", type=str, default=None, help="Archivo de salida del modelo")
    parser.add_argument("--seed", type=int, default=None, help="Semilla del entrenamiento")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Entrenar aunque el modelo guardado siga vigente",
    )

    args = parser.parse_args()

    try:
        result = run_training(
            listings_path=args.listings,
            swipes_path=args.swipes,
            preferences_path=args.preferences,
            output=args.output,
            seed=args.seed,
            force=args.force,
        )
        sys.exit(0 if result is None or result.success else 1)

    except KeyboardInterrupt:
        logger.info("Entrenamiento interrumpido por usuario")
        sys.exit(130)
    except (OSError, ValueError) as e:
        logger.error("Error leyendo archivos de entrada", error=str(e))
        sys.exit(1)
    except Exception as e:
        logger.error("Error fatal en entrenamiento", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
