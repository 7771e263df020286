# data_preparation.py

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd
from imblearn.over_sampling import SMOTE

from config import FEATURE_COLUMNS, LABEL_COLUMN, POSITIVE_LABEL
from errors import DatasetError

logger = logging.getLogger(__name__)


@dataclass
class TrainingSet:
    """Class-balanced labeled examples in source order."""

    features: np.ndarray
    labels: np.ndarray
    num_positive: int
    num_negative: int
    num_skipped: int = 0

    def __len__(self):
        return len(self.labels)


def load_and_preprocess_data(csv_path, class_cap=5000, positive_label=POSITIVE_LABEL):
    """
    Load the historical weather CSV and build a class-balanced training set.

    A row is dropped when any feature cell is not a number or the label cell
    is missing. Any label other than `positive_label` counts as "no rain".
    Each class keeps at most `class_cap` rows, the first ones encountered.

    Parameters:
        csv_path (str or Path): Path to a CSV with the Temp9am ... RainTomorrow columns.
        class_cap (int): Maximum number of examples kept per class.
        positive_label (str): Label value meaning "rained next day".

    Returns:
        TrainingSet: Features of shape (n, 5), labels of shape (n,), and counts.
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise DatasetError(f"Dataset not found at '{csv_path}'")

    # Only empty cells are null; a literal "NA" label stays a (negative) string
    climate_data = pd.read_csv(csv_path, keep_default_na=False, na_values=[''])
    return preprocess_frame(climate_data, class_cap=class_cap, positive_label=positive_label)


def preprocess_frame(climate_data, class_cap=5000, positive_label=POSITIVE_LABEL):
    """
    Apply row validation and class capping to an already loaded DataFrame.

    Parameters:
        climate_data (pd.DataFrame): Raw rows with the dataset columns.
        class_cap (int): Maximum number of examples kept per class.
        positive_label (str): Label value meaning "rained next day".

    Returns:
        TrainingSet: The filtered, order-preserving training set.
    """
    missing = [col for col in FEATURE_COLUMNS + [LABEL_COLUMN] if col not in climate_data.columns]
    if missing:
        raise DatasetError(f"Dataset is missing columns: {', '.join(missing)}")

    # Non-numeric text becomes NaN so it is rejected with the empty cells
    features = climate_data[FEATURE_COLUMNS].apply(pd.to_numeric, errors='coerce')
    raw_labels = climate_data[LABEL_COLUMN]

    valid = np.isfinite(features.to_numpy(dtype=float)).all(axis=1) & raw_labels.notna().to_numpy()
    num_skipped = int((~valid).sum())

    labels = (raw_labels == positive_label).to_numpy().astype(int)

    # Running per-class counts over valid rows, in source order
    is_positive = valid & (labels == 1)
    is_negative = valid & (labels == 0)
    keep = (is_positive & (np.cumsum(is_positive) <= class_cap)) | \
           (is_negative & (np.cumsum(is_negative) <= class_cap))

    X = features.to_numpy(dtype=float)[keep]
    y = labels[keep]
    num_positive = int((y == 1).sum())
    num_negative = int((y == 0).sum())

    logger.info("Rain: %d, No rain: %d, skipped invalid rows: %d",
                num_positive, num_negative, num_skipped)

    if len(y) == 0:
        raise DatasetError(f"No valid rows in dataset ({num_skipped} skipped)")

    return TrainingSet(features=X, labels=y, num_positive=num_positive,
                       num_negative=num_negative, num_skipped=num_skipped)


def split_train_test(X, y, test_size=0.2):
    """
    Split the data into training and testing sets, preserving row order.

    Parameters:
        X (np.ndarray): Feature matrix.
        y (np.ndarray): Target labels.
        test_size (float): Proportion of the dataset to include in the test split.

    Returns:
        X_train, X_test, y_train, y_test (np.ndarray): The two partitions.
    """
    if not 0 <= test_size < 1:
        raise ValueError("test_size must be in [0, 1)")
    split_index = int(len(X) * (1 - test_size))
    return X[:split_index], X[split_index:], y[:split_index], y[split_index:]


def handle_class_imbalance(X, y, method='none'):
    """
    Optionally oversample the minority class after capping.

    Parameters:
        X (np.ndarray): Feature matrix.
        y (np.ndarray): Target labels.
        method (str): Method to handle imbalance ('smote', 'none').

    Returns:
        X_res (np.ndarray): Resampled feature matrix.
        y_res (np.ndarray): Resampled target labels.
    """
    if method == 'smote':
        smote = SMOTE(random_state=42)
        try:
            X_res, y_res = smote.fit_resample(X, y)
        except ValueError as exc:
            # Single class or too few minority neighbours
            raise DatasetError(f"SMOTE cannot resample this training set: {exc}") from exc
        logger.info("SMOTE resampled %d rows to %d", len(y), len(y_res))
        return X_res, y_res
    elif method == 'none':
        return X, y
    else:
        raise ValueError("Unsupported imbalance handling method.")
