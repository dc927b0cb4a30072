"""
NASA EONET (Earth Observatory Natural Event Tracker) v3 client.

API documentation: https://eonet.gsfc.nasa.gov/docs/v3

Open events are fetched worldwide; each event carries a list of dated
geometries, newest last. No API key required.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from earthscore.core.geometry import finite_or_none
from earthscore.core.http_client import BaseAPIClient

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Other"


@dataclass
class HazardEvent:
    """An open natural event; location is None when unresolvable."""

    id: str
    title: str
    category: str
    longitude: Optional[float] = None
    latitude: Optional[float] = None

    @property
    def has_location(self) -> bool:
        return self.longitude is not None and self.latitude is not None


@dataclass
class HazardEvents:
    events: List[HazardEvent] = field(default_factory=list)


def _pair(coords: Any) -> Optional[Tuple[float, float]]:
    """(lon, lat) from a GeoJSON position, validated."""
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        return None
    lon = finite_or_none(coords[0])
    lat = finite_or_none(coords[1])
    if lon is None or lat is None or abs(lat) > 90 or abs(lon) > 180:
        return None
    return lon, lat


def resolve_location(geometry: Any) -> Optional[Tuple[float, float]]:
    """
    Current (lon, lat) of an event.

    The last geometry entry is the newest. Point uses its pair and
    MultiPoint its last pair; any other geometry type is unresolvable.
    """
    if not isinstance(geometry, list) or not geometry:
        return None
    latest = geometry[-1]
    if not isinstance(latest, dict):
        return None

    kind = latest.get("type")
    coords = latest.get("coordinates")
    if kind == "Point":
        return _pair(coords)
    if kind == "MultiPoint" and isinstance(coords, list) and coords:
        return _pair(coords[-1])
    return None


class HazardEventsClient(BaseAPIClient):
    """Currently open hazard events worldwide."""

    SOURCE_NAME = "eonet"

    def __init__(self, limit: int = 200, **kwargs):
        super().__init__(**kwargs)
        self.limit = limit

    async def _fetch(self) -> Optional[HazardEvents]:
        data = await self.get(
            "events",
            params={"status": "open", "limit": self.limit},
            resource_id="open events",
        )
        return self.parse(data)

    @staticmethod
    def parse(data: Any) -> Optional[HazardEvents]:
        """
        Parse an EONET events document.

        A document without an ``events`` list is malformed (None); an empty
        list is a valid "nothing open" answer.
        """
        if not isinstance(data, dict) or not isinstance(data.get("events"), list):
            return None

        events = []
        for raw in data["events"]:
            if not isinstance(raw, dict):
                continue
            categories = raw.get("categories")
            category = DEFAULT_CATEGORY
            if isinstance(categories, list) and categories and isinstance(categories[0], dict):
                category = categories[0].get("title") or DEFAULT_CATEGORY

            location = resolve_location(raw.get("geometry"))
            events.append(
                HazardEvent(
                    id=str(raw.get("id", "")),
                    title=str(raw.get("title", "")),
                    category=str(category),
                    longitude=location[0] if location else None,
                    latitude=location[1] if location else None,
                )
            )

        logger.debug(f"[eonet] Parsed {len(events)} open events")
        return HazardEvents(events=events)
