import pytest

from explain import (
    CLOUD_COVER,
    COLD_TEMPERATURE,
    HIGH_HUMIDITY,
    HIGH_PRESSURE,
    LOW_PRESSURE,
    STABLE_CONDITIONS,
    STRONG_WIND,
    explain_prediction,
    normalize_for_radar,
    risk_label,
)


def test_four_reasons_in_rule_order() -> None:
    # temperature, humidity, pressure, wind speed, cloud cover
    reasons = explain_prediction([10, 80, 1005, 20, 70])
    assert reasons == [HIGH_HUMIDITY, LOW_PRESSURE, CLOUD_COVER, STRONG_WIND]


def test_stable_fallback_is_the_only_message() -> None:
    assert explain_prediction([20, 50, 1015, 5, 20]) == [STABLE_CONDITIONS]


def test_high_pressure_and_cold() -> None:
    assert explain_prediction([2, 40, 1025, 3, 10]) == [HIGH_PRESSURE, COLD_TEMPERATURE]


def test_thresholds_are_inclusive() -> None:
    reasons = explain_prediction([4.9, 75, 1010, 15, 60])
    assert reasons == [HIGH_HUMIDITY, LOW_PRESSURE, CLOUD_COVER, STRONG_WIND, COLD_TEMPERATURE]
    assert explain_prediction([5, 74.9, 1020, 14.9, 59.9]) == [HIGH_PRESSURE]


def test_explain_is_deterministic() -> None:
    features = [12, 90, 1001, 18, 95]
    assert explain_prediction(features) == explain_prediction(list(features))


@pytest.mark.parametrize("probability, label", [
    (0.0, "Low Risk"),
    (0.2999, "Low Risk"),
    (0.30, "Moderate Risk"),
    (0.5999, "Moderate Risk"),
    (0.60, "High Risk"),
    (1.0, "High Risk"),
])
def test_risk_bands(probability, label) -> None:
    assert risk_label(probability) == label


def test_radar_values_are_clipped() -> None:
    radar = normalize_for_radar([20, 50, 1000, 60, -5])
    assert radar == pytest.approx([0.5, 0.5, 0.5, 1.0, 0.0])
