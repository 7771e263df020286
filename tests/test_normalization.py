import numpy as np
import pytest

from normalization import NormalizationStats, apply_normalization, fit_normalizer


def _features():
    rng = np.random.default_rng(3)
    return np.column_stack([
        rng.uniform(0, 35, 500),
        rng.uniform(20, 100, 500),
        rng.uniform(990, 1035, 500),
        rng.uniform(0, 30, 500),
        rng.uniform(0, 100, 500),
    ])


def test_fit_then_apply_standardizes_columns() -> None:
    X = _features()
    stats = fit_normalizer(X)
    Z = apply_normalization(stats, X)
    assert np.allclose(Z.mean(axis=0), 0.0, atol=1e-9)
    assert np.allclose(Z.std(axis=0), 1.0, atol=1e-5)


def test_single_vector_matches_batch() -> None:
    X = _features()
    stats = fit_normalizer(X)
    batch = apply_normalization(stats, X)
    for i in range(0, len(X), 37):
        single = apply_normalization(stats, X[i])
        assert np.allclose(single, batch[i], rtol=0, atol=1e-12)


def test_constant_column_gets_epsilon_std() -> None:
    X = _features()
    X[:, 2] = 1013.0
    stats = fit_normalizer(X)
    assert stats.std[2] == pytest.approx(1e-6)
    assert np.isfinite(apply_normalization(stats, X)).all()


def test_fit_rejects_empty_and_wrong_width() -> None:
    with pytest.raises(ValueError):
        fit_normalizer(np.empty((0, 5)))
    with pytest.raises(ValueError):
        fit_normalizer(np.ones((3, 4)))


def test_stats_round_trip_through_dict() -> None:
    stats = fit_normalizer(_features())
    assert NormalizationStats.from_dict(stats.to_dict()) == stats


@pytest.mark.parametrize("payload", [
    None,
    {'mean': [0.0] * 5},
    {'mean': [0.0] * 4, 'std': [1.0] * 5},
    {'mean': [0.0] * 5, 'std': [1.0, 1.0, 0.0, 1.0, 1.0]},
    {'mean': ['a'] * 5, 'std': [1.0] * 5},
    {'mean': [float('nan')] * 5, 'std': [1.0] * 5},
])
def test_from_dict_rejects_bad_payloads(payload) -> None:
    with pytest.raises(ValueError):
        NormalizationStats.from_dict(payload)
