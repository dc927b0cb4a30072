"""
Open-Meteo data source adapter.

Current temperature, humidity, apparent temperature, precipitation, wind
and weather code for a point.

API Documentation: https://open-meteo.com/en/docs

No API key required.
"""

from earthscore.sources.open_meteo.client import CurrentWeather, RealtimeWeatherClient

__all__ = ["CurrentWeather", "RealtimeWeatherClient"]
