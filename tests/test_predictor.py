from datetime import datetime, timedelta, timezone

import pytest

from haven.ml.features import NUM_FEATURES, calculate_feature_stats
from haven.ml.predictor import (
    is_model_valid,
    predict_swipe_likelihood,
    predict_swipe_likelihood_batch,
    should_retrain_model,
)
from haven.ml.trainer import LogisticRegressionTrainer, train_model
from haven.models import ModelWeights

from conftest import CURRENT_YEAR

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


def _model(nyc_listings, weights=None, bias=0.0, trained_at=NOW, training_size=20, accuracy=0.8):
    return ModelWeights(
        weights=weights if weights is not None else [[0.0]] * NUM_FEATURES,
        biases=[bias],
        feature_stats=calculate_feature_stats(nyc_listings, current_year=CURRENT_YEAR),
        trained_at=trained_at.isoformat(),
        training_size=training_size,
        accuracy=accuracy,
    )


def test_zero_model_predicts_sigmoid_of_bias(nyc_listings):
    assert predict_swipe_likelihood(nyc_listings[0], _model(nyc_listings)) == 0.5
    high = predict_swipe_likelihood(nyc_listings[0], _model(nyc_listings, bias=3.0))
    assert high == pytest.approx(1 / (1 + 2.718281828459045 ** -3))


def test_prediction_uses_model_feature_stats(nyc_listings):
    # solo pesa el precio: el listing más caro del corpus de entrenamiento vale 1.0
    weights = [[0.0]] * NUM_FEATURES
    weights = [[4.0]] + weights[1:]
    model = _model(nyc_listings, weights=weights, bias=-2.0)

    pricey = predict_swipe_likelihood(nyc_listings[3], model, current_year=CURRENT_YEAR)
    cheap = predict_swipe_likelihood(nyc_listings[4], model, current_year=CURRENT_YEAR)
    assert pricey == pytest.approx(1 / (1 + 2.718281828459045 ** -2))
    assert cheap == pytest.approx(1 / (1 + 2.718281828459045 ** 2))


def test_prediction_error_returns_neutral(nyc_listings):
    broken = _model(nyc_listings, weights=[[1.0]] * 3)
    assert predict_swipe_likelihood(nyc_listings[0], broken) == 0.5


def test_batch_prediction(nyc_listings, mixed_swipes, user_location):
    result = train_model(
        nyc_listings,
        mixed_swipes,
        user_location,
        trainer=LogisticRegressionTrainer(seed=11),
        current_year=CURRENT_YEAR,
    )
    probabilities = predict_swipe_likelihood_batch(
        nyc_listings, result.weights, user_location, current_year=CURRENT_YEAR
    )
    assert len(probabilities) == len(nyc_listings)
    assert all(0.0 <= p <= 1.0 for p in probabilities)


def test_model_validity(nyc_listings):
    assert is_model_valid(_model(nyc_listings), now=NOW + timedelta(days=6))
    assert not is_model_valid(_model(nyc_listings), now=NOW + timedelta(days=8))
    assert not is_model_valid(None)
    assert not is_model_valid({})


def test_model_validity_from_dict(nyc_listings):
    data = _model(nyc_listings).model_dump()
    assert is_model_valid(data, now=NOW)

    missing = dict(data)
    del missing["biases"]
    assert not is_model_valid(missing, now=NOW)


def test_model_validity_rejects_incomplete_models(nyc_listings):
    assert not is_model_valid(_model(nyc_listings, weights=[[1.0]] * 3), now=NOW)
    bad_timestamp = _model(nyc_listings).model_copy(update={"trained_at": "yesterday"})
    assert not is_model_valid(bad_timestamp, now=NOW)


def test_naive_timestamps_are_utc(nyc_listings):
    model = _model(nyc_listings, trained_at=NOW.replace(tzinfo=None))
    assert is_model_valid(model, now=NOW + timedelta(days=1))


def test_freshly_trained_model_is_valid(nyc_listings, mixed_swipes):
    result = train_model(nyc_listings, mixed_swipes, trainer=LogisticRegressionTrainer(seed=5))
    assert is_model_valid(result.weights)


def test_should_retrain_model(nyc_listings):
    fresh = _model(nyc_listings)
    assert not should_retrain_model(3, None, now=NOW)
    assert should_retrain_model(5, None, now=NOW)
    assert should_retrain_model(7, _model(nyc_listings), now=NOW + timedelta(days=9))
    assert not should_retrain_model(7, fresh, now=NOW)
    assert should_retrain_model(20, fresh, now=NOW)
