"""
NOAA heat index model.

Rothfusz regression over air temperature (°F) and relative humidity (%),
with the two NWS boundary adjustments. Pure functions, no I/O.
"""
import math
from typing import Optional

# Rothfusz regression coefficients
C1 = -42.379
C2 = 2.04901523
C3 = 10.14333127
C4 = -0.22475541
C5 = -0.00683783
C6 = -0.05481717
C7 = 0.00122874
C8 = 0.00085282
C9 = -0.00000199

# Below this temperature the regression is not a meaningful heat index
HEAT_INDEX_FLOOR_F = 80.0

HEAT_RISK_TIERS = [
    (85.0, "Low"),
    (95.0, "Moderate"),
    (105.0, "High"),
    (115.0, "Very High"),
]


def heat_index_f(temp_f: float, rel_humidity: float) -> float:
    """Rothfusz heat index in °F."""
    t = temp_f
    r = rel_humidity
    hi = (
        C1
        + C2 * t
        + C3 * r
        + C4 * t * r
        + C5 * t * t
        + C6 * r * r
        + C7 * t * t * r
        + C8 * t * r * r
        + C9 * t * t * r * r
    )

    if r < 13 and 80 <= t <= 112:
        hi -= ((13 - r) / 4) * math.sqrt((17 - abs(t - 95)) / 17)
    if r > 85 and 80 <= t <= 87:
        hi += ((r - 85) / 10) * ((87 - t) / 5)

    return hi


def effective_heat_index_f(temp_f: float, rel_humidity: float) -> float:
    """
    Heat index as displayed: the raw temperature below 80 °F,
    the regression value otherwise.
    """
    if temp_f < HEAT_INDEX_FLOOR_F:
        return temp_f
    return heat_index_f(temp_f, rel_humidity)


def heat_risk_label(hi: Optional[float]) -> Optional[str]:
    """Qualitative badge for a heat index (display only)."""
    if hi is None:
        return None
    for upper, label in HEAT_RISK_TIERS:
        if hi < upper:
            return label
    return "Extreme"
