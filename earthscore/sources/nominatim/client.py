"""
OpenStreetMap Nominatim reverse geocoding client.

API documentation: https://nominatim.org/release-docs/latest/api/Reverse/

Only the coarse settlement class (city/town/village/...) and a label are
extracted. Usage policy requires a descriptive User-Agent.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from earthscore.core.geometry import Point
from earthscore.core.http_client import BaseAPIClient

logger = logging.getLogger(__name__)

# Address keys that name a settlement, most urban first
SETTLEMENT_KEYS = ("city", "town", "village", "hamlet", "suburb", "isolated_dwelling")

# Zoom 14 resolves to suburb/village granularity
REVERSE_ZOOM = 14


@dataclass
class Settlement:
    settlement_class: Optional[str] = None
    name: Optional[str] = None
    display_name: Optional[str] = None


class ReverseGeocodingClient(BaseAPIClient):
    """Point -> settlement classification."""

    SOURCE_NAME = "nominatim"

    def _build_headers(self) -> Dict[str, str]:
        headers = super()._build_headers()
        headers["Accept-Language"] = "en"
        return headers

    async def _fetch(self, point: Point) -> Optional[Settlement]:
        data = await self.get(
            "reverse",
            params={
                "format": "jsonv2",
                "lat": point.latitude,
                "lon": point.longitude,
                "zoom": REVERSE_ZOOM,
                "addressdetails": 1,
            },
            resource_id="reverse",
        )
        return self.parse(data)

    @staticmethod
    def parse(data: Any) -> Optional[Settlement]:
        """
        Extract the settlement class.

        Open ocean and other unmatched points come back as {"error": ...}
        and yield None.
        """
        if not isinstance(data, dict) or "error" in data:
            return None

        address = data.get("address")
        address = address if isinstance(address, dict) else {}
        display_name = data.get("display_name")
        display_name = display_name if isinstance(display_name, str) else None

        for key in SETTLEMENT_KEYS:
            name = address.get(key)
            if isinstance(name, str) and name:
                return Settlement(settlement_class=key, name=name, display_name=display_name)

        addresstype = data.get("addresstype")
        if isinstance(addresstype, str) and addresstype:
            name = data.get("name")
            return Settlement(
                settlement_class=addresstype,
                name=name if isinstance(name, str) and name else None,
                display_name=display_name,
            )

        if display_name:
            return Settlement(display_name=display_name)
        return None
