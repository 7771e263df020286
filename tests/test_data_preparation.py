import numpy as np
import pandas as pd
import pytest

from data_preparation import (
    handle_class_imbalance,
    load_and_preprocess_data,
    preprocess_frame,
    split_train_test,
)
from errors import DatasetError


def _frame(rows):
    return pd.DataFrame(rows, columns=[
        'Temp9am', 'Humidity9am', 'Pressure9am', 'WindSpeed9am', 'Cloud9am', 'RainTomorrow'])


def test_invalid_rows_are_skipped(tmp_path) -> None:
    path = tmp_path / 'data.csv'
    path.write_text(
        "Temp9am,Humidity9am,Pressure9am,WindSpeed9am,Cloud9am,RainTomorrow\n"
        "20,60,1012,5,3,No\n"
        "NA,60,1012,5,3,Yes\n"
        "18,abc,1012,5,3,Yes\n"
        "19,70,1008,7,,Yes\n"
        "17,80,1005,9,7,\n"
        "16,85,1004,11,8,Yes\n"
    )
    training_set = load_and_preprocess_data(path)

    assert len(training_set) == 2
    assert training_set.labels.tolist() == [0, 1]
    assert training_set.features[1].tolist() == [16.0, 85.0, 1004.0, 11.0, 8.0]
    assert training_set.num_skipped == 4


def test_only_exact_yes_is_positive() -> None:
    frame = _frame([
        [20, 60, 1012, 5, 3, 'Yes'],
        [20, 60, 1012, 5, 3, 'yes'],
        [20, 60, 1012, 5, 3, 'Maybe'],
        [20, 60, 1012, 5, 3, 'No'],
    ])
    training_set = preprocess_frame(frame)
    assert training_set.labels.tolist() == [1, 0, 0, 0]


def test_class_cap_preserves_order() -> None:
    rows = []
    for i in range(6000):
        rows.append([float(i), 80, 1005, 10, 7, 'Yes'])
        if i < 100:
            rows.append([float(-i - 1), 40, 1020, 2, 1, 'No'])
    training_set = preprocess_frame(_frame(rows), class_cap=5000)

    assert training_set.num_positive == 5000
    assert training_set.num_negative == 100
    positives = training_set.features[training_set.labels == 1][:, 0]
    negatives = training_set.features[training_set.labels == 0][:, 0]
    assert positives.tolist() == [float(i) for i in range(5000)]
    assert negatives.tolist() == [float(-i - 1) for i in range(100)]
    # Interleaving of the first rows is unchanged
    assert training_set.features[:4, 0].tolist() == [0.0, -1.0, 1.0, -2.0]


def test_missing_column_raises() -> None:
    frame = pd.DataFrame({'Temp9am': [1.0], 'RainTomorrow': ['No']})
    with pytest.raises(DatasetError):
        preprocess_frame(frame)


def test_missing_file_raises(tmp_path) -> None:
    with pytest.raises(DatasetError):
        load_and_preprocess_data(tmp_path / 'absent.csv')


def test_split_keeps_order() -> None:
    X = np.arange(20, dtype=float).reshape(10, 2)
    y = np.arange(10)
    X_train, X_test, y_train, y_test = split_train_test(X, y, test_size=0.2)
    assert y_train.tolist() == list(range(8))
    assert y_test.tolist() == [8, 9]
    assert X_test[0].tolist() == [16.0, 17.0]


def test_smote_balances_classes() -> None:
    rng = np.random.default_rng(1)
    X = rng.normal(size=(60, 5))
    y = np.array([1] * 10 + [0] * 50)
    X_res, y_res = handle_class_imbalance(X, y, method='smote')
    assert (y_res == 1).sum() == (y_res == 0).sum() == 50


def test_unknown_imbalance_method() -> None:
    with pytest.raises(ValueError):
        handle_class_imbalance(np.zeros((2, 5)), np.array([0, 1]), method='magic')


def test_na_label_is_kept_as_no_rain(tmp_path) -> None:
    path = tmp_path / 'data.csv'
    path.write_text(
        "Temp9am,Humidity9am,Pressure9am,WindSpeed9am,Cloud9am,RainTomorrow\n"
        "20,60,1012,5,3,NA\n"
        "16,85,1004,11,8,Yes\n"
        "NA,60,1012,5,3,No\n"
    )
    training_set = load_and_preprocess_data(path)

    assert len(training_set) == 2
    assert training_set.labels.tolist() == [0, 1]
    assert training_set.num_negative == 1
    # "NA" is still not a number in a feature column
    assert training_set.num_skipped == 1


def test_no_valid_rows_raises(tmp_path) -> None:
    path = tmp_path / 'data.csv'
    path.write_text(
        "Temp9am,Humidity9am,Pressure9am,WindSpeed9am,Cloud9am,RainTomorrow\n"
        "NA,60,1012,5,3,No\n"
        "18,60,1012,5,3,\n"
    )
    with pytest.raises(DatasetError):
        load_and_preprocess_data(path)


def test_smote_on_single_class_raises() -> None:
    X = np.random.default_rng(0).normal(size=(20, 5))
    with pytest.raises(DatasetError):
        handle_class_imbalance(X, np.zeros(20, dtype=int), method='smote')
