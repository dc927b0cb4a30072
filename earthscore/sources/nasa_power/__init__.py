"""
NASA POWER data source adapter.

Provides near-surface meteorology for a single point:
- Daily - T2M_MAX and RH2M over the 7 days ending yesterday (UTC)
- Hourly - T2M and RH2M over the last 2 days (community RE, UTC)

API Documentation: https://power.larc.nasa.gov/docs/services/api/

No API key required - free public API.
Missing values are reported with the fill value -999.
"""

from earthscore.sources.nasa_power.client import (
    DailyClimate,
    DailyClimateClient,
    HourlyClimate,
    HourlyClimateClient,
)

__all__ = ["DailyClimate", "DailyClimateClient", "HourlyClimate", "HourlyClimateClient"]
