"""
NASA EONET (Earth Observatory Natural Event Tracker) adapter.

Open natural events worldwide (wildfires, severe storms, floods, volcanoes,
dust and haze). Only open events are requested; the newest geometry of each
event is used as its location.

API Documentation: https://eonet.gsfc.nasa.gov/docs/v3

No API key required.
"""

from earthscore.sources.eonet.client import HazardEvent, HazardEvents, HazardEventsClient

__all__ = ["HazardEvent", "HazardEvents", "HazardEventsClient"]
