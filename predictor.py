# predictor.py

import enum
import logging
import math
import numbers
from dataclasses import dataclass
from typing import Optional

import torch

from artifacts import discard_artifact, load_artifact, save_artifact
from config import NUM_FEATURES, TrainingConfig
from data_preparation import handle_class_imbalance, load_and_preprocess_data, split_train_test
from errors import ArtifactCorruptError, ArtifactNotFoundError, DatasetError
from normalization import apply_normalization, fit_normalizer
from train_utils import fit_classifier

logger = logging.getLogger(__name__)


class PredictionStatus(enum.Enum):
    OK = 'ok'
    MODEL_NOT_READY = 'model_not_ready'
    INVALID_INPUT = 'invalid_input'


@dataclass(frozen=True)
class PredictionResult:
    """Outcome of one prediction; probability is None unless status is OK."""

    probability: Optional[float] = None
    status: PredictionStatus = PredictionStatus.OK
    message: str = ''

    @property
    def ok(self):
        return self.status is PredictionStatus.OK


def _is_valid_feature(value):
    # bool is an int subclass but never a measurement
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


class RainPredictor:
    """
    Holds one trained model together with the stats it was trained with.

    Instances are independent, so several models can be used side by side.
    """

    def __init__(self, model=None, stats=None):
        self._model = None
        self._stats = None
        if model is not None or stats is not None:
            self.load(model, stats)

    @property
    def is_ready(self):
        return self._model is not None and self._stats is not None

    @property
    def stats(self):
        return self._stats

    @property
    def model(self):
        return self._model

    def load(self, model, stats):
        if model is None or stats is None:
            raise ValueError("A model and its normalization stats must be loaded together")
        model.eval()
        self._model = model
        self._stats = stats

    def reset(self):
        self._model = None
        self._stats = None

    def predict(self, features):
        """
        Estimate the probability of rain tomorrow.

        Parameters:
            features (sequence): [temperature, humidity, pressure, wind speed, cloud cover].

        Returns:
            PredictionResult: probability in [0, 1], or None with the reason.
        """
        if not self.is_ready:
            logger.error("Model or normalization not ready")
            return PredictionResult(status=PredictionStatus.MODEL_NOT_READY,
                                    message="Model or normalization not ready")

        try:
            values = list(features)
        except TypeError:
            values = None
        if values is None or len(values) != NUM_FEATURES or not all(_is_valid_feature(v) for v in values):
            logger.error("Invalid feature values %r", features)
            return PredictionResult(status=PredictionStatus.INVALID_INPUT,
                                    message=f"Expected {NUM_FEATURES} finite numbers, got {features!r}")

        normalized = apply_normalization(self._stats, [float(v) for v in values])
        with torch.no_grad():
            inputs = torch.tensor(normalized, dtype=torch.float32).unsqueeze(0)
            probability = self._model.predict_proba(inputs).item()
        return PredictionResult(probability=probability)


def train_predictor(dataset_path, config=None):
    """
    Train a predictor from the dataset CSV.

    Stats and weights are fitted on the leading rows only; the trailing
    `config.test_size` share is left for evaluate.py.

    Parameters:
        dataset_path (str or Path): Historical weather CSV.
        config (TrainingConfig): Hyperparameters, defaults when omitted.

    Returns:
        predictor (RainPredictor): A ready predictor.
        history (dict): Per-epoch loss and accuracy.
    """
    config = config or TrainingConfig()
    config.validate()

    training_set = load_and_preprocess_data(dataset_path, class_cap=config.class_cap,
                                            positive_label=config.positive_label)
    X_train, _, y_train, _ = split_train_test(training_set.features, training_set.labels,
                                              test_size=config.test_size)
    if len(y_train) == 0:
        raise DatasetError("Too few valid rows to train after holding out the test split")

    stats = fit_normalizer(X_train)
    X = apply_normalization(stats, X_train)
    X, y = handle_class_imbalance(X, y_train, method=config.imbalance_method)

    model, history = fit_classifier(X, y, config)
    return RainPredictor(model, stats), history


def load_or_train(artifact_path, dataset_path, config=None):
    """
    Load a saved model, training and saving a new one when none is usable.

    Parameters:
        artifact_path (str or Path): Saved model file.
        dataset_path (str or Path): Historical weather CSV used if training is needed.
        config (TrainingConfig): Hyperparameters for training.

    Returns:
        RainPredictor: A ready predictor.
    """
    try:
        model, stats = load_artifact(artifact_path)
        return RainPredictor(model, stats)
    except ArtifactNotFoundError:
        logger.info("No saved model found.")
    except ArtifactCorruptError as exc:
        logger.warning("Saved model rejected, retraining: %s", exc)
        discard_artifact(artifact_path)

    logger.info("Training new model...")
    predictor, _ = train_predictor(dataset_path, config)
    save_artifact(artifact_path, predictor.model, predictor.stats)
    return predictor
