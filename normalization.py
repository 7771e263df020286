# normalization.py

import math
from dataclasses import dataclass

import numpy as np

from config import NUM_FEATURES, STD_EPSILON


@dataclass(frozen=True)
class NormalizationStats:
    """Per-feature mean and standard deviation computed from the training set."""

    mean: tuple
    std: tuple

    def to_dict(self):
        return {'mean': [float(v) for v in self.mean], 'std': [float(v) for v in self.std]}

    @classmethod
    def from_dict(cls, payload):
        """
        Rebuild stats from their serialized form, rejecting anything unusable.

        Parameters:
            payload (dict): Mapping with 'mean' and 'std' lists of length 5.

        Returns:
            NormalizationStats: The validated stats.
        """
        if not isinstance(payload, dict) or 'mean' not in payload or 'std' not in payload:
            raise ValueError("Normalization stats need 'mean' and 'std'")

        mean = _as_float_tuple(payload['mean'], 'mean')
        std = _as_float_tuple(payload['std'], 'std')
        if any(s <= 0 for s in std):
            raise ValueError("Normalization std must be strictly positive")
        return cls(mean=mean, std=std)


def _as_float_tuple(values, name):
    if not isinstance(values, (list, tuple)) or len(values) != NUM_FEATURES:
        raise ValueError(f"Normalization {name} must have {NUM_FEATURES} values")
    try:
        result = tuple(float(v) for v in values)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Normalization {name} must be numeric") from exc
    if not all(math.isfinite(v) for v in result):
        raise ValueError(f"Normalization {name} must be finite")
    return result


def fit_normalizer(features, epsilon=STD_EPSILON):
    """
    Compute column-wise mean and population standard deviation.

    Parameters:
        features (array-like): Training feature matrix of shape (n, 5).
        epsilon (float): Added to every std so constant columns stay divisible.

    Returns:
        NormalizationStats: The fitted statistics.
    """
    X = np.asarray(features, dtype=np.float64)
    if X.ndim != 2 or X.shape[1] != NUM_FEATURES:
        raise ValueError(f"Expected a feature matrix of shape (n, {NUM_FEATURES})")
    if X.shape[0] == 0:
        raise ValueError("Cannot fit normalization on an empty training set")

    mean = X.mean(axis=0)
    std = np.sqrt(((X - mean) ** 2).mean(axis=0)) + epsilon
    return NormalizationStats(mean=tuple(mean.tolist()), std=tuple(std.tolist()))


def apply_normalization(stats, features):
    """
    Standardize a single feature vector or a batch with the same stats.

    Parameters:
        stats (NormalizationStats): Fitted statistics.
        features (array-like): Shape (5,) or (n, 5).

    Returns:
        np.ndarray: float64 array with the same shape as the input.
    """
    X = np.asarray(features, dtype=np.float64)
    if X.shape[-1] != NUM_FEATURES or X.ndim not in (1, 2):
        raise ValueError(f"Expected {NUM_FEATURES} features per vector")
    mean = np.asarray(stats.mean, dtype=np.float64)
    std = np.asarray(stats.std, dtype=np.float64)
    return (X - mean) / std
