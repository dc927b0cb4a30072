"""
Centralized upstream source registry.

Consolidates all source-specific settings in one place:
- Base URLs
- Required vs optional keys
- Request deadlines
- Which derived signal each source feeds

This eliminates magic strings scattered across client files.
"""

from dataclasses import dataclass
from typing import Optional, Dict
from enum import Enum


class APIKeyRequirement(Enum):
    """Whether an API key is required, recommended, or not needed."""

    REQUIRED = "required"
    RECOMMENDED = "recommended"
    OPTIONAL = "optional"


@dataclass
class APIConfig:
    """Configuration for a single upstream source."""

    source_name: str
    base_url: str
    api_key_requirement: APIKeyRequirement
    config_key: str  # Key name in Settings (e.g., "openaq_api_key")
    signup_url: str

    # Request settings
    timeout_seconds: float = 9.0
    connect_timeout_seconds: float = 5.0

    # What the feed contributes to the result
    signal: str = ""
    notes: Optional[str] = None


# =============================================================================
# SOURCE REGISTRY - All upstream feeds consumed by the score pipeline
# =============================================================================

API_REGISTRY: Dict[str, APIConfig] = {
    # -------------------------------------------------------------------------
    # CLIMATE
    # -------------------------------------------------------------------------
    "nasa_power_daily": APIConfig(
        source_name="nasa_power_daily",
        base_url="https://power.larc.nasa.gov/api/temporal/daily/point",
        api_key_requirement=APIKeyRequirement.OPTIONAL,
        config_key="",
        signup_url="https://power.larc.nasa.gov/docs/services/api/",
        signal="daily climate",
        notes="Daily T2M_MAX and RH2M. Refresh lag of at least one day.",
    ),
    "nasa_power_hourly": APIConfig(
        source_name="nasa_power_hourly",
        base_url="https://power.larc.nasa.gov/api/temporal/hourly/point",
        api_key_requirement=APIKeyRequirement.OPTIONAL,
        config_key="",
        signup_url="https://power.larc.nasa.gov/docs/services/api/",
        signal="hourly climate",
        notes="Hourly T2M and RH2M in UTC. Fill value -999.",
    ),
    "open_meteo": APIConfig(
        source_name="open_meteo",
        base_url="https://api.open-meteo.com/v1/forecast",
        api_key_requirement=APIKeyRequirement.OPTIONAL,
        config_key="",
        signup_url="https://open-meteo.com/en/docs",
        signal="realtime weather",
        notes="Current conditions. No key for non-commercial use.",
    ),
    # -------------------------------------------------------------------------
    # HAZARDS
    # -------------------------------------------------------------------------
    "eonet": APIConfig(
        source_name="eonet",
        base_url="https://eonet.gsfc.nasa.gov/api/v3",
        api_key_requirement=APIKeyRequirement.OPTIONAL,
        config_key="",
        signup_url="https://eonet.gsfc.nasa.gov/docs/v3",
        signal="hazard events",
        notes="Open natural events worldwide, newest geometry last.",
    ),
    # -------------------------------------------------------------------------
    # DEMOGRAPHICS & PLACE
    # -------------------------------------------------------------------------
    "sedac": APIConfig(
        source_name="sedac",
        base_url="https://sedac.ciesin.columbia.edu/geoserver/wms",
        api_key_requirement=APIKeyRequirement.OPTIONAL,
        config_key="",
        signup_url="https://sedac.ciesin.columbia.edu/data/collection/gpw-v4",
        signal="population density",
        notes="GPWv4 2020 population density raster via WMS GetFeatureInfo.",
    ),
    "nominatim": APIConfig(
        source_name="nominatim",
        base_url="https://nominatim.openstreetmap.org",
        api_key_requirement=APIKeyRequirement.OPTIONAL,
        config_key="",
        signup_url="https://operations.osmfoundation.org/policies/nominatim/",
        signal="settlement classification",
        notes="1 req/sec usage policy. A descriptive User-Agent is mandatory.",
    ),
    # -------------------------------------------------------------------------
    # AIR QUALITY
    # -------------------------------------------------------------------------
    "openaq": APIConfig(
        source_name="openaq",
        base_url="https://api.openaq.org/v3",
        api_key_requirement=APIKeyRequirement.REQUIRED,
        config_key="openaq_api_key",
        signup_url="https://explore.openaq.org/register",
        signal="observed air quality",
        notes="v3 requires an X-API-Key header.",
    ),
}


def get_api_config(source: str) -> APIConfig:
    """
    Get configuration for a source.

    Args:
        source: Source name (e.g., 'eonet', 'sedac')

    Returns:
        APIConfig for the source

    Raises:
        KeyError: If source not found in registry
    """
    source_lower = source.lower()
    if source_lower not in API_REGISTRY:
        available = ", ".join(sorted(API_REGISTRY.keys()))
        raise KeyError(
            f"Unknown API source: {source}. " f"Available sources: {available}"
        )
    return API_REGISTRY[source_lower]


def get_all_sources() -> list[str]:
    """Get list of all registered sources."""
    return sorted(API_REGISTRY.keys())
