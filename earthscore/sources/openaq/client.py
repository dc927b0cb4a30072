"""
OpenAQ v3 client for the nearest recent PM2.5 measurement.

API documentation: https://docs.openaq.org/

Search is tiered: the innermost radius is tried first and the search widens
only when no PM2.5 station is found. Requires an API key (X-API-Key); the
client is disabled without one.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from earthscore.core.api_errors import InvalidPointError
from earthscore.core.geometry import Point, bounding_box, distance_km, finite_or_none
from earthscore.core.http_client import BaseAPIClient
from earthscore.sources.openaq.metadata import pm25_to_us_aqi

logger = logging.getLogger(__name__)

PM25_PARAMETER_ID = 2
LOCATION_PAGE_LIMIT = 100
MAX_STATIONS_PER_TIER = 3


@dataclass
class StationCandidate:
    location_id: int
    name: Optional[str]
    distance_km: float
    sensor_ids: Tuple[int, ...]


@dataclass
class AirQualityObservation:
    pm25: Optional[float] = None
    us_aqi: Optional[int] = None
    station_name: Optional[str] = None
    distance_km: Optional[float] = None
    observed_at: Optional[str] = None


def _pm25_sensor_ids(location: Dict[str, Any]) -> Tuple[int, ...]:
    ids = []
    for sensor in location.get("sensors") or []:
        if not isinstance(sensor, dict):
            continue
        parameter = sensor.get("parameter") or {}
        if parameter.get("id") == PM25_PARAMETER_ID or parameter.get("name") == "pm25":
            if isinstance(sensor.get("id"), int):
                ids.append(sensor["id"])
    return tuple(ids)


class AirQualityStationClient(BaseAPIClient):
    """Nearest PM2.5 station reading within tiered radii."""

    SOURCE_NAME = "openaq"

    def __init__(self, radii_km: Sequence[float] = (50.0, 100.0), **kwargs):
        super().__init__(**kwargs)
        self.radii_km = tuple(sorted(radii_km))

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _build_headers(self) -> Dict[str, str]:
        headers = super()._build_headers()
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    async def fetch(self, *args, **kwargs) -> Any:
        if not self.enabled:
            logger.debug("[openaq] No API key configured; station lookup skipped")
            return None
        return await super().fetch(*args, **kwargs)

    async def _fetch(self, point: Point) -> Optional[AirQualityObservation]:
        for radius in self.radii_km:
            candidates = await self._stations_within(point, radius)
            for station in candidates[:MAX_STATIONS_PER_TIER]:
                observation = await self._latest_pm25(station)
                if observation is not None:
                    logger.debug(
                        f"[openaq] PM2.5 from {station.name!r} at {station.distance_km:.1f} km"
                    )
                    return observation
        return None

    async def _stations_within(self, point: Point, radius_km: float) -> List[StationCandidate]:
        min_lon, min_lat, max_lon, max_lat = bounding_box(point, radius_km)
        data = await self.get(
            "locations",
            params={
                "bbox": f"{min_lon:.4f},{min_lat:.4f},{max_lon:.4f},{max_lat:.4f}",
                "parameters_id": PM25_PARAMETER_ID,
                "limit": LOCATION_PAGE_LIMIT,
            },
            resource_id=f"locations {radius_km:g}km",
        )
        return self.parse_locations(data, point, radius_km)

    @staticmethod
    def parse_locations(data: Any, point: Point, radius_km: float) -> List[StationCandidate]:
        """PM2.5-capable locations inside the radius, nearest first."""
        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            return []

        candidates = []
        for loc in results:
            if not isinstance(loc, dict) or not isinstance(loc.get("id"), int):
                continue
            coords = loc.get("coordinates") or {}
            lat = finite_or_none(coords.get("latitude"))
            lon = finite_or_none(coords.get("longitude"))
            sensor_ids = _pm25_sensor_ids(loc)
            if lat is None or lon is None or not sensor_ids:
                continue
            try:
                d = distance_km(point, Point(lat, lon))
            except InvalidPointError:
                continue
            if d <= radius_km:
                candidates.append(
                    StationCandidate(
                        location_id=loc["id"],
                        name=loc.get("name"),
                        distance_km=d,
                        sensor_ids=sensor_ids,
                    )
                )
        return sorted(candidates, key=lambda c: c.distance_km)

    async def _latest_pm25(self, station: StationCandidate) -> Optional[AirQualityObservation]:
        data = await self.get(
            f"locations/{station.location_id}/latest",
            resource_id=f"latest {station.location_id}",
        )
        return self.parse_latest(data, station)

    @staticmethod
    def parse_latest(data: Any, station: StationCandidate) -> Optional[AirQualityObservation]:
        """Latest PM2.5 value reported by one of the station's PM2.5 sensors."""
        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            return None

        for row in results:
            if not isinstance(row, dict) or row.get("sensorsId") not in station.sensor_ids:
                continue
            value = finite_or_none(row.get("value"))
            if value is None or value < 0:
                continue
            when = row.get("datetime") or {}
            return AirQualityObservation(
                pm25=value,
                us_aqi=pm25_to_us_aqi(value),
                station_name=station.name,
                distance_km=round(station.distance_km, 1),
                observed_at=when.get("utc") if isinstance(when, dict) else None,
            )
        return None
