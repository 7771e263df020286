# weather_api.py

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import requests

from errors import WeatherAPIError

logger = logging.getLogger(__name__)

OPENWEATHER_URL = 'https://api.openweathermap.org/data/2.5/weather'


@dataclass(frozen=True)
class Observation:
    """Current conditions at one location, in metric units."""

    temperature: float
    humidity: float
    pressure: float
    wind_speed: float
    cloud_cover: float
    location: Optional[str] = None
    description: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    wind_direction: Optional[float] = None
    visibility: Optional[float] = None

    def features(self):
        return [self.temperature, self.humidity, self.pressure, self.wind_speed, self.cloud_cover]


class WeatherProvider(Protocol):
    def fetch(self, location: str) -> Observation:
        ...


class OpenWeatherMapProvider:
    """
    Fetch current weather from the OpenWeatherMap API.
    """

    def __init__(self, api_key, session=None, base_url=OPENWEATHER_URL, timeout=None):
        if not api_key:
            raise WeatherAPIError("An OpenWeatherMap API key is required")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.base_url = base_url
        self.timeout = timeout

    def fetch(self, location):
        params = {'q': location, 'appid': self.api_key, 'units': 'metric'}
        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise WeatherAPIError(f"Error fetching weather data: {exc}") from exc

        if not response.ok:
            raise WeatherAPIError(f"Location not found or API error ({response.status_code}).")

        try:
            data = response.json()
        except ValueError as exc:
            raise WeatherAPIError("Weather API returned invalid JSON") from exc

        logger.debug("Weather data: %s", data)
        return parse_observation(data, location)


def parse_observation(data, location=None):
    """
    Map an OpenWeatherMap current-weather payload to an Observation.

    Parameters:
        data (dict): Decoded JSON response.
        location (str): Name used when the payload carries none.

    Returns:
        Observation: The parsed conditions.
    """
    try:
        main = data['main']
        weather = data.get('weather') or [{}]
        coord = data.get('coord') or {}
        return Observation(
            temperature=main['temp'],
            humidity=main['humidity'],
            pressure=main['pressure'],
            wind_speed=data['wind']['speed'],
            cloud_cover=data['clouds']['all'],
            location=data.get('name') or location,
            description=weather[0].get('description'),
            lat=coord.get('lat'),
            lon=coord.get('lon'),
            wind_direction=data['wind'].get('deg'),
            visibility=data.get('visibility'),
        )
    except (KeyError, TypeError, IndexError, AttributeError) as exc:
        raise WeatherAPIError(f"Weather API response is missing a field: {exc}") from exc
