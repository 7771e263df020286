# errors.py


class RainPredictionError(Exception):
    """Base class for errors raised by the rain prediction toolkit."""


class DatasetError(RainPredictionError):
    """The training dataset cannot be used at all (missing file or columns)."""


class ArtifactError(RainPredictionError):
    """Base class for model artifact persistence failures."""


class ArtifactNotFoundError(ArtifactError):
    """No artifact exists at the requested path."""


class ArtifactCorruptError(ArtifactError):
    """An artifact exists but its model or normalization part cannot be trusted."""


class WeatherAPIError(RainPredictionError):
    """The weather provider could not deliver an observation."""


class ForecastError(RainPredictionError):
    """A forecast cycle produced no probability."""

    def __init__(self, result):
        super().__init__(result.message)
        self.result = result
