"""Current weather and daily forecast from the OpenWeatherMap service."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

import requests

log = logging.getLogger(__name__)

KELVIN_ZERO = 273.15
WEATHER_URL = "http://api.openweathermap.org/data/2.5/weather"
FORECAST_URL = "http://api.openweathermap.org/data/2.5/forecast/daily"
FORECAST_DAYS = 5


def convert_temp(kelvin) -> str:
    """Kelvin to whole degrees Celsius, halves rounded up."""
    return str(math.floor(float(kelvin) - KELVIN_ZERO + 0.5))


def _number(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, (int, float)):
        number = float(value)
        return str(int(number)) if number.is_integer() else str(number)
    return ""


@dataclass
class WeatherData:
    """Weather conditions for one point in time."""

    day_of_week: str = ""
    weather_icon: str = ""
    weather_code: int = 0
    weather_description: str = "--"
    weather_text: str = "--"
    temperature: str = "--"
    temperature_min: str = "--"
    temperature_max: str = "--"
    pressure: str = "--"
    humidity: str = "--"
    is_night: bool = False

    def update(self, obj) -> None:
        """Fill from one weather object of the service's JSON."""
        timestamp = _number(obj.get("dt"))
        self.day_of_week = datetime.fromtimestamp(timestamp).strftime("%a")

        weather = obj.get("weather")
        if isinstance(weather, list) and weather:
            first = weather[0] if isinstance(weather[0], dict) else {}
            self.weather_icon = _text(first.get("icon"))
            self.weather_code = int(_number(first.get("id")))
            self.weather_text = _text(first.get("main"))
            self.weather_description = _text(first.get("description"))

        main = obj.get("main")
        if not isinstance(main, dict):
            main = {}
        self.temperature = convert_temp(_number(main.get("temp")))
        self.temperature_min = convert_temp(_number(main.get("temp_min")))
        self.temperature_max = convert_temp(_number(main.get("temp_max")))
        self.pressure = _text(main.get("pressure"))
        self.humidity = _text(main.get("humidity"))

        self.is_night = self.weather_icon.endswith("n")


class WeatherModel:
    """Current weather and a few days of forecast for a location."""

    def __init__(self, latitude, longitude, api_key, session=None) -> None:
        self.latitude = str(latitude)
        self.longitude = str(longitude)
        self.api_key = api_key
        self.session = session if session is not None else requests.Session()
        self.weather = WeatherData()
        self.forecast: list[WeatherData] = []

    def _fetch(self, url: str, **extra: str) -> tuple[bool, Optional[Any]]:
        params = {"lat": self.latitude, "lon": self.longitude, "mode": "json"}
        params.update(extra)
        params["APPID"] = self.api_key
        try:
            response = self.session.get(url, params=params)
            response.raise_for_status()
        except requests.RequestException as exc:
            log.warning("Error in weather request %s: %s", url, exc)
            return False, None
        try:
            return True, response.json()
        except ValueError:
            return True, None

    def refresh(self) -> None:
        """Query the current weather, then the forecast."""
        ok, obj = self._fetch(WEATHER_URL)
        if ok:
            self.handle_weather(obj)
        ok, obj = self._fetch(FORECAST_URL, cnt=str(FORECAST_DAYS))
        if ok:
            self.handle_forecast(obj)

    def handle_weather(self, obj) -> None:
        if isinstance(obj, dict):
            self.weather.update(obj)

    def handle_forecast(self, obj) -> None:
        self.forecast = []
        if not isinstance(obj, dict):
            return
        entries = obj.get("list")
        for entry in entries if isinstance(entries, list) else []:
            data = WeatherData()
            data.update(entry if isinstance(entry, dict) else {})
            self.forecast.append(data)