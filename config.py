# config.py

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

# Column order is the feature order everywhere downstream
FEATURE_COLUMNS = ['Temp9am', 'Humidity9am', 'Pressure9am', 'WindSpeed9am', 'Cloud9am']
FEATURE_NAMES = ['temperature', 'humidity', 'pressure', 'wind_speed', 'cloud_cover']
LABEL_COLUMN = 'RainTomorrow'
POSITIVE_LABEL = 'Yes'
NUM_FEATURES = len(FEATURE_COLUMNS)

HIDDEN_SIZES = (16, 8)
STD_EPSILON = 1e-6

HISTORY_CAPACITY = 5


@dataclass
class TrainingConfig:
    """
    Hyperparameters for training the rain classifier.

    The defaults are the values the shipped model is trained with.
    """

    num_epochs: int = 30
    batch_size: int = 32
    learning_rate: float = 0.001
    class_cap: int = 5000
    imbalance_method: str = 'none'
    positive_label: str = POSITIVE_LABEL
    seed: Optional[int] = None
    test_size: float = 0.2

    def validate(self):
        if self.num_epochs <= 0:
            raise ValueError("num_epochs must be positive")
        if self.batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if self.learning_rate <= 0:
            raise ValueError("learning_rate must be positive")
        if self.class_cap <= 0:
            raise ValueError("class_cap must be positive")
        if not 0 <= self.test_size < 1:
            raise ValueError("test_size must be in [0, 1)")
        if self.imbalance_method not in ('none', 'smote'):
            raise ValueError("Unsupported imbalance handling method.")


@dataclass
class AppConfig:
    """Filesystem locations and credentials used by the command-line tools."""

    dataset_path: Path = Path('data/weatherAUS.csv')
    artifact_path: Path = Path('artifacts/rain_model.pt')
    history_path: Path = Path('artifacts/prediction_history.json')
    api_key: Optional[str] = field(default_factory=lambda: os.getenv('OPENWEATHER_API_KEY'))
    training: TrainingConfig = field(default_factory=TrainingConfig)

    def validate(self):
        self.training.validate()
        if str(self.artifact_path) == str(self.history_path):
            raise ValueError("artifact_path and history_path must differ")
