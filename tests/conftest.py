import numpy as np
import pandas as pd
import pytest

from config import FEATURE_COLUMNS, LABEL_COLUMN, TrainingConfig


def make_weather_frame(num_rows=200, seed=0):
    rng = np.random.default_rng(seed)
    humidity = rng.uniform(20, 100, num_rows)
    pressure = rng.uniform(995, 1030, num_rows)
    frame = pd.DataFrame({
        'Temp9am': rng.uniform(0, 35, num_rows),
        'Humidity9am': humidity,
        'Pressure9am': pressure,
        'WindSpeed9am': rng.uniform(0, 30, num_rows),
        'Cloud9am': rng.integers(0, 9, num_rows).astype(float),
    })
    frame[LABEL_COLUMN] = np.where((humidity > 70) & (pressure < 1015), 'Yes', 'No')
    return frame[FEATURE_COLUMNS + [LABEL_COLUMN]]


@pytest.fixture
def weather_csv(tmp_path):
    path = tmp_path / 'weatherAUS.csv'
    make_weather_frame().to_csv(path, index=False)
    return path


@pytest.fixture
def fast_config():
    return TrainingConfig(num_epochs=2, batch_size=32, seed=7)
