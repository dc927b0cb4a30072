"""
NASA POWER API clients for daily and hourly point climate series.

Official API documentation:
https://power.larc.nasa.gov/docs/services/api/

Parameters used:
- T2M_MAX: daily maximum air temperature at 2 m (°C)
- T2M: hourly air temperature at 2 m (°C)
- RH2M: relative humidity at 2 m (%)

Missing values are reported with the fill value -999.
No API key required.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from earthscore.core.geometry import Point, finite_or_none
from earthscore.core.http_client import BaseAPIClient

logger = logging.getLogger(__name__)

FILL_VALUE = -999.0

DAILY_WINDOW_DAYS = 7
HOURLY_WINDOW_DAYS = 2


@dataclass
class DailyObservation:
    day: str  # YYYYMMDD
    t_max_c: float
    relative_humidity: Optional[float] = None


@dataclass
class DailyClimate:
    """Per-day max temperature and humidity, oldest first."""

    days: List[DailyObservation] = field(default_factory=list)


@dataclass
class HourlyObservation:
    timestamp: str  # YYYYMMDDHH, UTC
    temperature_c: float
    relative_humidity: Optional[float] = None


@dataclass
class HourlyClimate:
    """Hourly temperature and humidity in UTC, oldest first."""

    hours: List[HourlyObservation] = field(default_factory=list)


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _power_value(series: Dict[str, Any], key: str) -> Optional[float]:
    value = finite_or_none(series.get(key))
    if value is None or value <= FILL_VALUE:
        return None
    return value


def _parameters(data: Any) -> Dict[str, Dict[str, Any]]:
    """Return properties.parameter, or an empty dict when the shape is off."""
    if not isinstance(data, dict):
        return {}
    props = data.get("properties")
    if not isinstance(props, dict):
        return {}
    params = props.get("parameter")
    return params if isinstance(params, dict) else {}


def _series(params: Dict[str, Any], name: str) -> Dict[str, Any]:
    series = params.get(name)
    return series if isinstance(series, dict) else {}


class _PowerClient(BaseAPIClient):
    """Shared query building for POWER point endpoints."""

    COMMUNITY = "AG"

    def _point_params(self, point: Point, parameters: str, start: date, end: date) -> Dict[str, Any]:
        return {
            "parameters": parameters,
            "community": self.COMMUNITY,
            "latitude": point.latitude,
            "longitude": point.longitude,
            "start": start.strftime("%Y%m%d"),
            "end": end.strftime("%Y%m%d"),
            "format": "JSON",
        }


class DailyClimateClient(_PowerClient):
    """
    Daily T2M_MAX / RH2M for the trailing week ending yesterday.

    POWER refreshes with at least a one day lag, so today is never requested.
    """

    SOURCE_NAME = "nasa_power_daily"

    async def _fetch(self, point: Point, today: Optional[date] = None) -> Optional[DailyClimate]:
        today = today or _utc_today()
        end = today - timedelta(days=1)
        start = end - timedelta(days=DAILY_WINDOW_DAYS - 1)

        data = await self.get(
            self.base_url,
            params=self._point_params(point, "T2M_MAX,T2M_MIN,RH2M", start, end),
            resource_id=f"daily {start:%Y%m%d}-{end:%Y%m%d}",
        )
        return self.parse(data)

    @staticmethod
    def parse(data: Any) -> Optional[DailyClimate]:
        """Parse a POWER daily response; None if no usable day is present."""
        params = _parameters(data)
        t_max = _series(params, "T2M_MAX")
        humidity = _series(params, "RH2M")

        days = []
        for key in sorted(t_max):
            value = _power_value(t_max, key)
            if value is None:
                continue
            days.append(
                DailyObservation(
                    day=key,
                    t_max_c=value,
                    relative_humidity=_power_value(humidity, key),
                )
            )

        if not days:
            logger.debug("[nasa_power_daily] Response carried no usable days")
            return None
        return DailyClimate(days=days)


class HourlyClimateClient(_PowerClient):
    """Hourly T2M / RH2M (UTC) for the trailing two days ending yesterday."""

    SOURCE_NAME = "nasa_power_hourly"
    COMMUNITY = "RE"

    async def _fetch(self, point: Point, today: Optional[date] = None) -> Optional[HourlyClimate]:
        today = today or _utc_today()
        end = today - timedelta(days=1)
        start = end - timedelta(days=HOURLY_WINDOW_DAYS - 1)

        params = self._point_params(point, "T2M,RH2M", start, end)
        params["time-standard"] = "UTC"
        data = await self.get(
            self.base_url,
            params=params,
            resource_id=f"hourly {start:%Y%m%d}-{end:%Y%m%d}",
        )
        return self.parse(data)

    @staticmethod
    def parse(data: Any) -> Optional[HourlyClimate]:
        """Parse a POWER hourly response; None if no usable hour is present."""
        params = _parameters(data)
        temperature = _series(params, "T2M")
        humidity = _series(params, "RH2M")

        hours = []
        for key in sorted(temperature):
            value = _power_value(temperature, key)
            if value is None:
                continue
            hours.append(
                HourlyObservation(
                    timestamp=key,
                    temperature_c=value,
                    relative_humidity=_power_value(humidity, key),
                )
            )

        if not hours:
            return None
        return HourlyClimate(hours=hours)
