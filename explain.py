# explain.py

import numpy as np

HIGH_HUMIDITY = "High humidity increases the likelihood of rain."
LOW_PRESSURE = "Low atmospheric pressure often precedes rainfall."
HIGH_PRESSURE = "High atmospheric pressure generally reduces rain risk."
CLOUD_COVER = "Significant cloud cover suggests unstable conditions."
STRONG_WIND = "Stronger winds may indicate approaching weather systems."
COLD_TEMPERATURE = "Cold temperatures may result in snow instead of rain."
STABLE_CONDITIONS = "Weather conditions appear stable with no strong rain indicators."

LOW_RISK = "Low Risk"
MODERATE_RISK = "Moderate Risk"
HIGH_RISK = "High Risk"


def explain_prediction(features):
    """
    Turn raw observation values into human-readable rain indicators.

    The rules only look at the raw values, never at the model weights.

    Parameters:
        features (sequence): [temperature, humidity, pressure, wind speed, cloud cover].

    Returns:
        list of str: Matching reasons in rule order, or the single stable message.
    """
    temp, humidity, pressure, wind_speed, cloud_cover = features
    reasons = []

    if humidity >= 75:
        reasons.append(HIGH_HUMIDITY)
    if pressure <= 1010:
        reasons.append(LOW_PRESSURE)
    if pressure >= 1020:
        reasons.append(HIGH_PRESSURE)
    if cloud_cover >= 60:
        reasons.append(CLOUD_COVER)
    if wind_speed >= 15:
        reasons.append(STRONG_WIND)
    if temp < 5:
        reasons.append(COLD_TEMPERATURE)

    if not reasons:
        reasons.append(STABLE_CONDITIONS)
    return reasons


def risk_label(probability):
    """Band a rain probability; each band includes its lower bound."""
    if probability < 0.3:
        return LOW_RISK
    if probability < 0.6:
        return MODERATE_RISK
    return HIGH_RISK


def normalize_for_radar(features):
    """
    Scale raw features to [0, 1] for a radar chart.

    Parameters:
        features (sequence): [temperature, humidity, pressure, wind speed, cloud cover].

    Returns:
        list of float: Clipped chart values in feature order.
    """
    temp, humidity, pressure, wind_speed, cloud_cover = features
    scaled = np.array([
        temp / 40,
        humidity / 100,
        (pressure - 950) / 100,  # 950-1050 hPa
        wind_speed / 50,
        cloud_cover / 100,
    ], dtype=float)
    return np.clip(scaled, 0.0, 1.0).tolist()
