"""Current-weather lookup for the composer header.

One GET to Open-Meteo for temperature and WMO weather code, mapped onto a
small label/icon table. Failures are never surfaced: the caller just keeps
showing its placeholder.
"""

from __future__ import annotations

import json
import urllib.parse
import urllib.request
from dataclasses import dataclass

from loguru import logger

from stickerjournal.core.exceptions import WeatherError

DEFAULT_BASE_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_LOCATION = (40.7128, -74.006)

_RAIN_CODES = {51, 53, 55, 56, 57, 61, 63, 65, 80, 81, 82}
_SNOW_CODES = {66, 67, 71, 73, 75, 77, 85, 86}
_STORM_CODES = {95, 96, 99}


@dataclass(frozen=True)
class WeatherInfo:
    label: str
    temp_c: int
    icon: str

    def to_dict(self) -> dict:
        return {"label": self.label, "tempC": self.temp_c, "icon": self.icon}


def weather_code_to_ui(code: int) -> tuple[str, str]:
    """(label, icon) for a WMO weather code."""
    if code == 0:
        return "Clear", "sunny"
    if code in (1, 2, 3):
        return "Cloudy", "partly_cloudy_day"
    if code in (45, 48):
        return "Fog", "foggy"
    if code in _RAIN_CODES:
        return "Rain", "rainy"
    if code in _SNOW_CODES:
        return "Snow", "ac_unit"
    if code in _STORM_CODES:
        return "Storm", "thunderstorm"
    return "Weather", "wb_cloudy"


class WeatherClient:
    """Minimal Open-Meteo client."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        default_location: tuple[float, float] = DEFAULT_LOCATION,
        timeout: int = 5,
    ):
        self.base_url = base_url
        self.default_location = default_location
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> WeatherClient:
        return cls(
            base_url=config.get("weather.base_url", DEFAULT_BASE_URL),
            default_location=(
                float(config.get("weather.default_latitude", DEFAULT_LOCATION[0])),
                float(config.get("weather.default_longitude", DEFAULT_LOCATION[1])),
            ),
            timeout=int(config.get("weather.timeout", 5)),
        )

    def fetch(self, latitude: float, longitude: float) -> WeatherInfo:
        """Fetch current conditions.

        Raises:
            WeatherError: On network failure or an unexpected payload.
        """
        query = urllib.parse.urlencode(
            {
                "latitude": latitude,
                "longitude": longitude,
                "current": "temperature_2m,weather_code",
                "temperature_unit": "celsius",
            }
        )
        req = urllib.request.Request(url=f"{self.base_url}?{query}", headers={"Accept": "application/json"})
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                data = json.loads(resp.read().decode("utf-8", errors="ignore"))
        except (OSError, ValueError) as e:
            raise WeatherError(f"Weather request failed: {e}") from e

        current = data.get("current") if isinstance(data, dict) else None
        if not isinstance(current, dict):
            raise WeatherError("Weather payload has no current conditions")
        temperature = current.get("temperature_2m")
        code = current.get("weather_code")
        if not isinstance(temperature, (int, float)) or not isinstance(code, (int, float)):
            raise WeatherError("Weather payload is missing temperature_2m or weather_code")

        label, icon = weather_code_to_ui(int(code))
        return WeatherInfo(label=label, temp_c=round(temperature), icon=icon)

    def current_weather(self, latitude: float | None = None, longitude: float | None = None) -> WeatherInfo | None:
        """Conditions at the given position (or the default one); None on any failure."""
        if latitude is None or longitude is None:
            latitude, longitude = self.default_location
        try:
            return self.fetch(latitude, longitude)
        except WeatherError as e:
            logger.debug(f"Weather unavailable: {e}")
            return None
