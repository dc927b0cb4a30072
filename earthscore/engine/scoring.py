"""
Livability score: deterministic scoring function.

Combines a fixed baseline with three independently scored components
(heat burden, nearby hazards, population pressure) into a 0-100 score,
plus threshold-crossing advice.

Components:
- baseline: 10
- heat (0-40): current heat index, else daily heat index, else neutral 25
- hazard (0-30): events within 100 km; none -> flat 28
- density (0-20): people/km², clamped to [0, 20000]; unknown -> 12
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from earthscore.core.heat_index import heat_risk_label
from earthscore.core.schemas import DerivedMetrics, ScoreComponents

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Model configuration
# ---------------------------------------------------------------------------
# (exclusive upper bound, points); the last entry is the floor
HEAT_TIERS: Tuple[Tuple[float, float], ...] = (
    (85.0, 40.0),
    (95.0, 30.0),
    (105.0, 20.0),
    (115.0, 10.0),
)
HEAT_FLOOR = 5.0

# (exclusive upper bound on count, points)
HAZARD_TIERS: Tuple[Tuple[int, float], ...] = (
    (3, 20.0),
    (6, 10.0),
)
HAZARD_FLOOR = 5.0

DENSITY_TIERS: Tuple[Tuple[float, float], ...] = (
    (1000.0, 20.0),
    (3000.0, 15.0),
    (7000.0, 10.0),
    (12000.0, 6.0),
)
DENSITY_FLOOR = 3.0
DENSITY_CLAMP_MAX = 20000.0

ADVICE_HIGH_HEAT = "High heat: prioritize shade, hydration, and indoor cooling mid-day."
ADVICE_HOT_DAYS = "Multiple extreme heat days recently; consider evening outdoor activity."
ADVICE_HAZARD_NEAR = "A recent hazard was reported within 20 km; check municipal alerts."
ADVICE_FLOOD = "Flood activity reported within 100 km; avoid low-lying routes and check drainage advisories."
ADVICE_DENSE = "Dense area: expect more traffic and noise; prioritize indoor air quality."
ADVICE_NO_CONCERNS = "No major concerns detected from recent Earth observation indicators."


@dataclass
class ScoringConfig:
    """Scoring parameters; defaults reproduce the published model."""

    baseline: float = 10.0
    heat_neutral: float = 25.0
    hazard_none: float = 28.0
    density_neutral: float = 12.0
    density_weight: float = 1.0

    high_heat_advice_f: float = 100.0
    hot_day_advice_count: int = 3
    near_hazard_km: float = 20.0
    dense_advice_threshold: float = 7000.0


@dataclass
class ScoreBreakdown:
    score: int
    components: ScoreComponents
    advice: List[str] = field(default_factory=list)
    heat_risk: Optional[str] = None
    heat_driver: Optional[float] = None


def _tiered(value: float, tiers: Sequence[Tuple[float, float]], floor: float) -> float:
    for upper, points in tiers:
        if value < upper:
            return points
    return floor


def heat_points(hi: Optional[float], config: ScoringConfig) -> float:
    if hi is None:
        return config.heat_neutral
    return _tiered(hi, HEAT_TIERS, HEAT_FLOOR)


def hazard_points(count: int, config: ScoringConfig) -> float:
    if count <= 0:
        return config.hazard_none
    return _tiered(count, HAZARD_TIERS, HAZARD_FLOOR)


def density_points(density: Optional[float], config: ScoringConfig) -> float:
    if density is None:
        return config.density_neutral
    pd = min(DENSITY_CLAMP_MAX, max(0.0, density))
    return _tiered(pd, DENSITY_TIERS, DENSITY_FLOOR)


def heat_driver(metrics: DerivedMetrics) -> Optional[float]:
    """Heat index that drives scoring: current when known, else daily."""
    if metrics.heat_index_current is not None:
        return metrics.heat_index_current
    return metrics.heat_index_daily


def score_metrics(metrics: DerivedMetrics, config: Optional[ScoringConfig] = None) -> ScoreBreakdown:
    """
    Score derived metrics.

    Args:
        metrics: output of signal derivation
        config: scoring parameters (defaults if None)

    Returns:
        ScoreBreakdown with the rounded, clamped score and threshold advice
    """
    config = config or ScoringConfig()
    advice: List[str] = []

    hi = heat_driver(metrics)
    heat = heat_points(hi, config)
    if hi is not None and hi >= config.high_heat_advice_f:
        advice.append(ADVICE_HIGH_HEAT)
    if metrics.recent_hot_day_count >= config.hot_day_advice_count:
        advice.append(ADVICE_HOT_DAYS)

    hazards = metrics.hazards
    count = hazards.count if hazards is not None else 0
    hazard = hazard_points(count, config)
    if count > 0:
        advice.append(
            f"Nearby hazards detected ({count} in 100 km). Stay informed on local advisories."
        )
        nearest = hazards.nearest_distance_km
        if nearest is not None and nearest < config.near_hazard_km:
            advice.append(ADVICE_HAZARD_NEAR)
    if metrics.flood_flag:
        advice.append(ADVICE_FLOOD)

    density = density_points(metrics.population_density, config) * config.density_weight
    pd = metrics.population_density
    if pd is not None and min(DENSITY_CLAMP_MAX, pd) > config.dense_advice_threshold:
        advice.append(ADVICE_DENSE)

    total = config.baseline + heat + hazard + density
    score = int(round(max(0.0, min(100.0, total))))

    logger.debug(
        f"Score {score}: baseline={config.baseline} heat={heat} "
        f"hazard={hazard} density={density}"
    )

    return ScoreBreakdown(
        score=score,
        components=ScoreComponents(
            baseline=config.baseline, heat=heat, hazard=hazard, density=density
        ),
        advice=advice,
        heat_risk=heat_risk_label(hi),
        heat_driver=hi,
    )
