"""
Signal derivation: raw source observations -> DerivedMetrics.

Pure and deterministic. Every adapter output is optional; an absent source
degrades its own signals and adds a note, never blocks the others.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from earthscore.core.geometry import Point, c_to_f, distance_km
from earthscore.core.heat_index import effective_heat_index_f
from earthscore.core.schemas import (
    CurrentConditions,
    DerivedMetrics,
    HazardSummary,
    ObservedAirQuality,
)
from earthscore.sources.eonet.client import HazardEvent, HazardEvents
from earthscore.sources.nasa_power.client import DailyClimate, HourlyClimate
from earthscore.sources.nominatim.client import Settlement
from earthscore.sources.open_meteo.client import CurrentWeather
from earthscore.sources.openaq.client import AirQualityObservation
from earthscore.sources.openaq.metadata import aqi_category

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Derivation constants
# ---------------------------------------------------------------------------
DEFAULT_HUMIDITY = 50.0
HOT_DAY_THRESHOLD_F = 100.0
HOURLY_MAX_WINDOW = 24

HAZARD_RADIUS_KM = 100.0
FLOOD_CATEGORY = "Floods"

AIR_QUALITY_BASELINE = 95
AIR_QUALITY_MAX_PENALTY = 60

# category -> [(max distance km, penalty)], nearest tier first
AIR_QUALITY_PENALTIES: Dict[str, List[Tuple[float, int]]] = {
    "Wildfires": [(100.0, 30), (300.0, 15)],
    "Dust and Haze": [(150.0, 20), (300.0, 10)],
    "Volcanoes": [(150.0, 15), (300.0, 8)],
}

NOTE_DAILY_UNAVAILABLE = "Daily climate data unavailable; heat metrics may be approximate."
NOTE_CURRENT_UNAVAILABLE = (
    "Current weather unavailable; current heat index falls back to daily data."
)
NOTE_HAZARDS_UNAVAILABLE = "Hazard data unavailable; hazard count may be undercounted."
NOTE_DENSITY_UNAVAILABLE = "Population density unavailable; density omitted from scoring."


@dataclass
class SourceObservations:
    """One slot per adapter; None marks an absent source."""

    daily: Optional[DailyClimate] = None
    hourly: Optional[HourlyClimate] = None
    realtime: Optional[CurrentWeather] = None
    hazards: Optional[HazardEvents] = None
    population_density: Optional[float] = None
    settlement: Optional[Settlement] = None
    air_quality: Optional[AirQualityObservation] = None


@dataclass
class DerivationResult:
    metrics: DerivedMetrics
    notes: List[str] = field(default_factory=list)


def _humidity(value: Optional[float]) -> float:
    return DEFAULT_HUMIDITY if value is None else value


def daily_heat(daily: Optional[DailyClimate]) -> Tuple[Optional[float], int]:
    """
    Heat index of the most recent day and the count of hot days.

    Returns:
        (heat index °F of the latest day or None, days with heat index > 100 °F)
    """
    if daily is None or not daily.days:
        return None, 0

    values = [
        effective_heat_index_f(c_to_f(d.t_max_c), _humidity(d.relative_humidity))
        for d in daily.days
    ]
    hot_days = sum(1 for hi in values if hi > HOT_DAY_THRESHOLD_F)
    return values[-1], hot_days


def hourly_heat(hourly: Optional[HourlyClimate]) -> Tuple[Optional[float], Optional[float]]:
    """
    Latest-hour heat index and the max over the trailing 24 hours.
    """
    if hourly is None or not hourly.hours:
        return None, None

    values = [
        effective_heat_index_f(c_to_f(h.temperature_c), _humidity(h.relative_humidity))
        for h in hourly.hours
    ]
    return values[-1], max(values[-HOURLY_MAX_WINDOW:])


def realtime_heat(realtime: Optional[CurrentWeather]) -> Optional[float]:
    if realtime is None or realtime.temperature_c is None:
        return None
    return effective_heat_index_f(
        c_to_f(realtime.temperature_c), _humidity(realtime.relative_humidity)
    )


def _located(point: Point, events: List[HazardEvent]) -> List[Tuple[HazardEvent, float]]:
    located = []
    for event in events:
        if not event.has_location:
            continue
        d = distance_km(point, Point(event.latitude, event.longitude))
        located.append((event, d))
    return located


def summarize_hazards(
    point: Point, events: List[HazardEvent]
) -> Tuple[HazardSummary, bool]:
    """
    Count, nearest distance and category histogram within 100 km.

    Returns:
        (summary, flood flag)
    """
    count = 0
    nearest: Optional[float] = None
    histogram: Dict[str, int] = {}
    flood = False

    for event, d in _located(point, events):
        if d > HAZARD_RADIUS_KM:
            continue
        count += 1
        nearest = d if nearest is None else min(nearest, d)
        histogram[event.category] = histogram.get(event.category, 0) + 1
        if event.category == FLOOD_CATEGORY:
            flood = True

    return (
        HazardSummary(count=count, nearest_distance_km=nearest, category_histogram=histogram),
        flood,
    )


def air_quality_proxy(point: Point, events: List[HazardEvent]) -> int:
    """
    Air-quality proxy (0 bad .. 100 good) from smoke/dust/ash source proximity.

    Starts at 95; each wildfire, dust/haze or volcanic event subtracts the
    penalty of the nearest tier it falls in. Total penalty is capped at 60.
    """
    penalty = 0
    for event, d in _located(point, events):
        for max_km, tier_penalty in AIR_QUALITY_PENALTIES.get(event.category, []):
            if d <= max_km:
                penalty += tier_penalty
                break

    value = round(AIR_QUALITY_BASELINE - min(AIR_QUALITY_MAX_PENALTY, penalty))
    return max(0, min(100, value))


def _current_conditions(realtime: Optional[CurrentWeather]) -> Optional[CurrentConditions]:
    if realtime is None:
        return None
    return CurrentConditions(
        temperature_f=c_to_f(realtime.temperature_c) if realtime.temperature_c is not None else None,
        relative_humidity=realtime.relative_humidity,
        wind_speed_kmh=realtime.wind_speed_kmh,
        precipitation_mm=realtime.precipitation_mm,
        cloud_cover_pct=realtime.cloud_cover_pct,
        uv_index=realtime.uv_index,
        observed_at=realtime.observed_at,
    )


def _observed_air_quality(obs: Optional[AirQualityObservation]) -> Optional[ObservedAirQuality]:
    if obs is None or obs.pm25 is None:
        return None
    return ObservedAirQuality(
        pm25=obs.pm25,
        us_aqi=obs.us_aqi,
        category=aqi_category(obs.us_aqi),
        station_name=obs.station_name,
        distance_km=obs.distance_km,
        observed_at=obs.observed_at,
    )


def derive_metrics(point: Point, obs: SourceObservations) -> DerivationResult:
    """
    Transform adapter outputs into DerivedMetrics plus degradation notes.
    """
    notes: List[str] = []

    daily_hi, hot_days = daily_heat(obs.daily)
    if obs.daily is None:
        notes.append(NOTE_DAILY_UNAVAILABLE)

    hourly_current, hourly_max = hourly_heat(obs.hourly)
    realtime_hi = realtime_heat(obs.realtime)
    if obs.realtime is None and obs.hourly is None:
        notes.append(NOTE_CURRENT_UNAVAILABLE)

    # realtime-weather > hourly-climate > daily-climate
    current_hi, current_source = None, None
    for value, source in (
        (realtime_hi, "realtime-weather"),
        (hourly_current, "hourly-climate"),
        (daily_hi, "daily-climate"),
    ):
        if value is not None:
            current_hi, current_source = value, source
            break

    hazards: Optional[HazardSummary] = None
    flood = False
    proxy: Optional[int] = None
    if obs.hazards is None:
        notes.append(NOTE_HAZARDS_UNAVAILABLE)
    else:
        hazards, flood = summarize_hazards(point, obs.hazards.events)
        proxy = air_quality_proxy(point, obs.hazards.events)

    if obs.population_density is None:
        notes.append(NOTE_DENSITY_UNAVAILABLE)

    settlement = obs.settlement
    if settlement is None:
        logger.debug("Settlement classification unavailable")

    metrics = DerivedMetrics(
        heat_index_daily=daily_hi,
        heat_index_current=current_hi,
        heat_index_current_source=current_source,
        heat_index_max_24h=hourly_max,
        recent_hot_day_count=hot_days,
        population_density=obs.population_density,
        hazards=hazards,
        air_quality_proxy=proxy,
        air_quality_observed=_observed_air_quality(obs.air_quality),
        settlement_class=settlement.settlement_class if settlement else None,
        settlement_name=settlement.name if settlement else None,
        flood_flag=flood,
        current_conditions=_current_conditions(obs.realtime),
    )
    return DerivationResult(metrics=metrics, notes=notes)
