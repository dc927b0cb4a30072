"""
Nominatim (OpenStreetMap) reverse geocoding adapter.

Resolves the settlement name and class (city, town, village, ...) for a point.

API Documentation: https://nominatim.org/release-docs/latest/api/Reverse/

No API key required.
Usage Policy: identify the application with a User-Agent; at most 1 request/second.
"""

from earthscore.sources.nominatim.client import ReverseGeocodingClient, Settlement

__all__ = ["ReverseGeocodingClient", "Settlement"]
