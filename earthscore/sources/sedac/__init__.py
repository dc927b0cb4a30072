"""
SEDAC GPWv4 population density adapter.

Reads a single raster cell (people per km², 2020) through WMS 1.3.0
GetFeatureInfo.

Service: https://sedac.ciesin.columbia.edu/geoserver/wms

No API key required.
"""

from earthscore.sources.sedac.client import PopulationDensityClient

__all__ = ["PopulationDensityClient"]
