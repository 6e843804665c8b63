import numpy as np
import pytest

from haven.ml.features import FEATURE_NAMES, NUM_FEATURES
from haven.ml.weights import feature_importances, suggest_scoring_weights
from haven.models import FeatureStats, ModelWeights

STATS = FeatureStats(price_min=0, price_max=1, sqft_min=0, sqft_max=1, age_min=0, age_max=1)


def _model(values, training_size=50, accuracy=1.0):
    return ModelWeights(
        weights=[[float(v)] for v in values],
        biases=[0.0],
        feature_stats=STATS,
        trained_at="2025-06-01T00:00:00+00:00",
        training_size=training_size,
        accuracy=accuracy,
    )


def _total(suggested):
    return (
        suggested.distance
        + suggested.amenities
        + suggested.property_features
        + suggested.quality
        + suggested.rating
    )


def test_suggestion_always_sums_to_100():
    rng = np.random.default_rng(123)
    for _ in range(500):
        values = rng.normal(0, rng.uniform(0.01, 5), size=NUM_FEATURES)
        values[rng.random(NUM_FEATURES) < 0.3] = 0.0
        suggested = suggest_scoring_weights(_model(values))
        assert _total(suggested) == 100
        assert 0.0 <= suggested.confidence <= 1.0


def test_distance_dominant_model():
    values = [0.0] * NUM_FEATURES
    values[-1] = -2.0  # el signo no importa, solo la magnitud
    suggested = suggest_scoring_weights(_model(values, training_size=25, accuracy=0.8))

    assert suggested.distance == 75
    assert suggested.rating == 25
    assert suggested.amenities == suggested.property_features == suggested.quality == 0
    assert suggested.top_priority == "distance"
    assert suggested.confidence == pytest.approx(0.5 * 0.8)


def test_ties_favor_amenities_and_lower_confidence():
    suggested = suggest_scoring_weights(_model([1.0] * NUM_FEATURES))

    # 25 cada grupo + 5 de rating = 105: el desvío se descuenta de distance
    assert suggested.distance == 20
    assert suggested.amenities == suggested.property_features == suggested.quality == 25
    assert suggested.rating == 5
    assert suggested.top_priority == "amenities"
    assert suggested.confidence == pytest.approx(0.7)


def test_groups_are_averaged_not_summed():
    values = [0.0] * NUM_FEATURES
    # 11 features de amenities con 1.0 contra una sola de quality con 1.0
    for i in range(6, 17):
        values[i] = 1.0
    values[0] = 3.0
    suggested = suggest_scoring_weights(_model(values))
    assert suggested.quality == suggested.amenities
    assert _total(suggested) == 100


def test_all_zero_weights_give_flat_distribution():
    suggested = suggest_scoring_weights(_model([0.0] * NUM_FEATURES))
    assert (
        suggested.distance,
        suggested.amenities,
        suggested.property_features,
        suggested.quality,
        suggested.rating,
    ) == (20, 20, 20, 20, 20)
    assert suggested.top_priority == "amenities"


def test_missing_accuracy_uses_neutral_confidence():
    values = [0.0] * NUM_FEATURES
    values[-1] = 1.0
    suggested = suggest_scoring_weights(_model(values, training_size=100, accuracy=None))
    assert suggested.confidence == pytest.approx(0.5)


def test_zero_accuracy_is_treated_as_missing():
    suggested = suggest_scoring_weights(_model([0.0] * NUM_FEATURES, accuracy=0.0))
    # Empate plano de 5 categorías: 0.5 de accuracy neutra por el factor de empate
    assert suggested.confidence == pytest.approx(0.5 * 0.7)


def test_feature_importances_sorted_by_magnitude():
    values = [0.0] * NUM_FEATURES
    values[3] = -2.0
    values[10] = 1.0
    ranked = feature_importances(_model(values))

    assert ranked[0] == (FEATURE_NAMES[3], -2.0)
    assert ranked[1] == (FEATURE_NAMES[10], 1.0)
    assert len(ranked) == NUM_FEATURES
