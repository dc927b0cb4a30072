"""
US EPA PM2.5 Air Quality Index breakpoints.

Each row maps a 24-hour PM2.5 concentration band (µg/m³) onto an AQI band.
Reference: EPA Technical Assistance Document for the Reporting of Daily
Air Quality (AQI), breakpoints in effect before the 2024 revision.
"""
import math
from typing import List, NamedTuple, Optional


class AQIBreakpoint(NamedTuple):
    conc_low: float
    conc_high: float
    aqi_low: int
    aqi_high: int
    category: str


PM25_BREAKPOINTS: List[AQIBreakpoint] = [
    AQIBreakpoint(0.0, 12.0, 0, 50, "Good"),
    AQIBreakpoint(12.1, 35.4, 51, 100, "Moderate"),
    AQIBreakpoint(35.5, 55.4, 101, 150, "Unhealthy for Sensitive Groups"),
    AQIBreakpoint(55.5, 150.4, 151, 200, "Unhealthy"),
    AQIBreakpoint(150.5, 250.4, 201, 300, "Very Unhealthy"),
    AQIBreakpoint(250.5, 350.4, 301, 400, "Hazardous"),
    AQIBreakpoint(350.5, 500.4, 401, 500, "Hazardous"),
]

AQI_MAX = 500


def pm25_to_us_aqi(concentration: Optional[float]) -> Optional[int]:
    """
    Convert a PM2.5 concentration to a US AQI value.

    The concentration is truncated to 0.1 µg/m³ before the piecewise-linear
    interpolation. Negative or non-finite input yields None; values above
    the table are reported as the AQI ceiling.
    """
    if concentration is None or not math.isfinite(concentration) or concentration < 0:
        return None

    c = math.floor(concentration * 10) / 10
    for bp in PM25_BREAKPOINTS:
        if bp.conc_low <= c <= bp.conc_high:
            aqi = (bp.aqi_high - bp.aqi_low) / (bp.conc_high - bp.conc_low) * (c - bp.conc_low) + bp.aqi_low
            return int(round(aqi))
    return AQI_MAX


def aqi_category(aqi: Optional[int]) -> Optional[str]:
    """Category label for an AQI value."""
    if aqi is None:
        return None
    for bp in PM25_BREAKPOINTS:
        if aqi <= bp.aqi_high:
            return bp.category
    return "Hazardous"
