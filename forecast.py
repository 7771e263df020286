# forecast.py

import argparse
import logging
import sys
from dataclasses import dataclass, field

from config import AppConfig
from errors import ForecastError, RainPredictionError
from explain import explain_prediction, normalize_for_radar, risk_label
from history import PredictionHistory
from logging_utils import configure_logging
from predictor import load_or_train
from weather_api import OpenWeatherMapProvider

logger = logging.getLogger(__name__)


@dataclass
class ForecastResult:
    """Everything a renderer needs for one prediction cycle."""

    location: str
    observation: object
    probability: float
    label: str
    reasons: list = field(default_factory=list)
    radar: list = field(default_factory=list)


def run_forecast(location, provider, predictor, history=None):
    """
    Fetch current weather for a location, then predict and explain rain tomorrow.

    Parameters:
        location (str): Place name passed to the weather provider.
        provider (WeatherProvider): Source of the observation.
        predictor (RainPredictor): Ready model and stats.
        history (PredictionHistory): Where successful predictions are recorded.

    Returns:
        ForecastResult: Probability, risk label, reasons and radar values.
    """
    location = (location or '').strip()
    if not location:
        raise ValueError("Please enter a location.")

    logger.info("Fetching weather for: %s", location)
    observation = provider.fetch(location)
    features = observation.features()

    result = predictor.predict(features)
    if not result.ok:
        raise ForecastError(result)

    forecast = ForecastResult(
        location=location,
        observation=observation,
        probability=result.probability,
        label=risk_label(result.probability),
        reasons=explain_prediction(features),
        radar=normalize_for_radar(features),
    )
    if history is not None:
        history.add(location, result.probability)
    logger.info("Prediction for %s: %.3f", location, result.probability)
    return forecast


def format_history(history):
    if not len(history):
        return "No predictions yet"
    lines = []
    for record in history.records:
        lines.append(f"{record.location} - {record.probability * 100:.1f}% "
                     f"[{risk_label(record.probability)}] {record.timestamp}")
    return "\n".join(lines)


def format_forecast(forecast):
    obs = forecast.observation
    lines = [
        f"Location: {forecast.location}",
        f"Conditions: {obs.description or 'n/a'}",
        f"Temperature: {obs.temperature} C, Humidity: {obs.humidity} %, "
        f"Pressure: {obs.pressure} hPa, Wind: {obs.wind_speed} m/s, Clouds: {obs.cloud_cover} %",
        f"Rain tomorrow: {forecast.probability * 100:.1f}% ({forecast.label})",
        "Why:",
    ]
    lines.extend(f"  - {reason}" for reason in forecast.reasons)
    return "\n".join(lines)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Predict tomorrow's rain for a location.")
    parser.add_argument('location', nargs='?', help="City name, e.g. 'Sydney'")
    parser.add_argument('--history', action='store_true', help="Show recent predictions")
    parser.add_argument('--clear-history', action='store_true', help="Delete recent predictions")
    parser.add_argument('--artifact', help="Saved model path")
    parser.add_argument('--dataset', help="Training CSV used if no saved model exists")
    parser.add_argument('--log-level', default='INFO')
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    config = AppConfig()
    if args.artifact:
        config.artifact_path = args.artifact
    if args.dataset:
        config.dataset_path = args.dataset
    config.validate()

    history = PredictionHistory(config.history_path)
    if args.clear_history:
        history.clear()
        print("Prediction history cleared.")
        return 0
    if args.history:
        print(format_history(history))
        return 0
    if not args.location:
        parser.error("a location is required")

    try:
        predictor = load_or_train(config.artifact_path, config.dataset_path, config.training)
        provider = OpenWeatherMapProvider(config.api_key)
        forecast = run_forecast(args.location, provider, predictor, history)
    except (RainPredictionError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(format_forecast(forecast))
    return 0


if __name__ == "__main__":
    sys.exit(main())
