"""
SEDAC Gridded Population of the World (GPWv4) density lookup.

Uses the SEDAC GeoServer WMS ``GetFeatureInfo`` operation on a small box
centred on the point, sampling the centre pixel.

Layer: gpw-v4:gpw-v4-population-density_2020 (people per km²)
No API key required.
"""

import logging
from typing import Any, Optional

from earthscore.core.geometry import Point, finite_or_none
from earthscore.core.http_client import BaseAPIClient

logger = logging.getLogger(__name__)

DENSITY_LAYER = "gpw-v4:gpw-v4-population-density_2020"
BOX_HALF_WIDTH_DEG = 0.01
RASTER_SIZE = 101

# Candidate property names for the pixel value, in preference order
VALUE_PROPERTIES = ("GRAY_INDEX", "gridcode", "DN")


class PopulationDensityClient(BaseAPIClient):
    """Population density (people/km²) at a point."""

    SOURCE_NAME = "sedac"

    async def _fetch(self, point: Point) -> Optional[float]:
        lat, lon = point.latitude, point.longitude
        d = BOX_HALF_WIDTH_DEG
        centre = str(RASTER_SIZE // 2)

        data = await self.get(
            self.base_url,
            params={
                "service": "WMS",
                "request": "GetFeatureInfo",
                "version": "1.3.0",
                "layers": DENSITY_LAYER,
                "query_layers": DENSITY_LAYER,
                "info_format": "application/json",
                "crs": "EPSG:4326",
                # WMS 1.3.0 with EPSG:4326 uses lat/lon axis order
                "bbox": f"{lat - d},{lon - d},{lat + d},{lon + d}",
                "width": str(RASTER_SIZE),
                "height": str(RASTER_SIZE),
                "i": centre,
                "j": centre,
                "styles": "",
            },
            resource_id="GetFeatureInfo",
        )
        return self.parse(data)

    @staticmethod
    def parse(data: Any) -> Optional[float]:
        """First feature's pixel value; None for nodata or missing features."""
        if not isinstance(data, dict):
            return None
        features = data.get("features")
        if not isinstance(features, list) or not features:
            return None
        first = features[0]
        props = first.get("properties") if isinstance(first, dict) else None
        if not isinstance(props, dict):
            return None

        for name in VALUE_PROPERTIES:
            raw = props.get(name)
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                continue
            value = finite_or_none(raw)
            # Negative values are raster nodata sentinels
            if value is None or value < 0:
                return None
            return value
        return None
