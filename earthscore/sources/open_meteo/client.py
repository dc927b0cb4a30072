"""
Open-Meteo current conditions client.

API documentation: https://open-meteo.com/en/docs

Requests the ``current`` block only. No API key required.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from earthscore.core.geometry import Point, finite_or_none
from earthscore.core.http_client import BaseAPIClient

logger = logging.getLogger(__name__)

CURRENT_VARIABLES = [
    "temperature_2m",
    "relative_humidity_2m",
    "wind_speed_10m",
    "precipitation",
    "cloud_cover",
    "uv_index",
]


@dataclass
class CurrentWeather:
    """Latest observation; every field may be missing."""

    temperature_c: Optional[float] = None
    relative_humidity: Optional[float] = None
    wind_speed_kmh: Optional[float] = None
    precipitation_mm: Optional[float] = None
    cloud_cover_pct: Optional[float] = None
    uv_index: Optional[float] = None
    observed_at: Optional[str] = None


class RealtimeWeatherClient(BaseAPIClient):
    """Single latest observation for a point."""

    SOURCE_NAME = "open_meteo"

    async def _fetch(self, point: Point) -> Optional[CurrentWeather]:
        data = await self.get(
            self.base_url,
            params={
                "latitude": point.latitude,
                "longitude": point.longitude,
                "current": ",".join(CURRENT_VARIABLES),
                "timezone": "UTC",
            },
            resource_id="current",
        )
        return self.parse(data)

    @staticmethod
    def parse(data: Any) -> Optional[CurrentWeather]:
        """
        Parse the ``current`` block.

        Returns None when there is no temperature, since the observation is
        then useless as a current-conditions source.
        """
        if not isinstance(data, dict):
            return None
        current = data.get("current")
        if not isinstance(current, dict):
            return None

        temperature = finite_or_none(current.get("temperature_2m"))
        if temperature is None:
            return None

        observed_at = current.get("time")
        return CurrentWeather(
            temperature_c=temperature,
            relative_humidity=finite_or_none(current.get("relative_humidity_2m")),
            wind_speed_kmh=finite_or_none(current.get("wind_speed_10m")),
            precipitation_mm=finite_or_none(current.get("precipitation")),
            cloud_cover_pct=finite_or_none(current.get("cloud_cover")),
            uv_index=finite_or_none(current.get("uv_index")),
            observed_at=observed_at if isinstance(observed_at, str) else None,
        )
