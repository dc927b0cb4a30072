"""
OpenAQ v3 air quality adapter.

Finds the nearest PM2.5 monitoring station within tiered search radii and
reads its latest measurement, converted to the US AQI.

API Documentation: https://docs.openaq.org/

API key required (OPENAQ_API_KEY); the adapter is inert without one.
"""

from earthscore.sources.openaq.client import AirQualityObservation, AirQualityStationClient
from earthscore.sources.openaq import metadata

__all__ = ["AirQualityObservation", "AirQualityStationClient", "metadata"]
