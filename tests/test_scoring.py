"""
Unit tests for the livability scoring function.
"""
import pytest

from earthscore.core.geometry import Point
from earthscore.core.schemas import DerivedMetrics, HazardSummary
from earthscore.engine.derivation import SourceObservations, derive_metrics
from earthscore.engine.scoring import (
    ADVICE_DENSE,
    ADVICE_FLOOD,
    ADVICE_HAZARD_NEAR,
    ADVICE_HIGH_HEAT,
    ADVICE_HOT_DAYS,
    ScoringConfig,
    density_points,
    hazard_points,
    heat_points,
    score_metrics,
)
from earthscore.sources.eonet.client import HazardEvents
from earthscore.sources.open_meteo.client import CurrentWeather

CONFIG = ScoringConfig()


@pytest.mark.unit
@pytest.mark.parametrize(
    "hi,points",
    [(None, 25.0), (59.0, 40.0), (85.0, 30.0), (94.9, 30.0), (95.0, 20.0), (105.0, 10.0), (115.0, 5.0)],
)
def test_heat_points(hi, points):
    assert heat_points(hi, CONFIG) == points


@pytest.mark.unit
@pytest.mark.parametrize("count,points", [(0, 28.0), (1, 20.0), (2, 20.0), (3, 10.0), (5, 10.0), (6, 5.0), (40, 5.0)])
def test_hazard_points(count, points):
    assert hazard_points(count, CONFIG) == points


@pytest.mark.unit
@pytest.mark.parametrize(
    "density,points",
    [(None, 12.0), (-5.0, 20.0), (0.0, 20.0), (999.0, 20.0), (1000.0, 15.0), (3000.0, 10.0),
     (7000.0, 6.0), (12000.0, 3.0), (90000.0, 3.0)],
)
def test_density_points(density, points):
    assert density_points(density, CONFIG) == points


@pytest.mark.unit
def test_all_signals_absent_scores_75():
    breakdown = score_metrics(DerivedMetrics())

    assert breakdown.score == 75
    assert breakdown.advice == []
    assert breakdown.heat_risk is None
    assert breakdown.components.baseline == 10.0
    assert breakdown.components.heat == 25.0
    assert breakdown.components.hazard == 28.0
    assert breakdown.components.density == 12.0


@pytest.mark.unit
@pytest.mark.parametrize("weight,score", [(0.0, 63), (1.0, 75), (2.0, 87)])
def test_density_weight_scales_neutral_density(weight, score):
    breakdown = score_metrics(DerivedMetrics(), ScoringConfig(density_weight=weight))

    assert breakdown.components.density == 12.0 * weight
    assert breakdown.score == score


@pytest.mark.unit
def test_reykjavik_summer_afternoon():
    """59 °F, no hazards nearby, low density -> 98."""
    point = Point(64.1466, -21.9426)
    obs = SourceObservations(
        realtime=CurrentWeather(temperature_c=15.0, relative_humidity=70.0),
        hazards=HazardEvents(events=[]),
        population_density=450.0,
    )

    breakdown = score_metrics(derive_metrics(point, obs).metrics)

    assert breakdown.score == 98
    assert breakdown.heat_risk == "Low"
    assert breakdown.advice == []


@pytest.mark.unit
def test_score_bounds():
    worst = DerivedMetrics(
        heat_index_current=130.0,
        hazards=HazardSummary(count=50, nearest_distance_km=1.0),
        population_density=50000.0,
    )
    best = DerivedMetrics(
        heat_index_current=50.0,
        hazards=HazardSummary(count=0),
        population_density=10.0,
    )

    assert score_metrics(worst).score == 23
    assert score_metrics(best).score == 98
    for metrics in (worst, best, DerivedMetrics()):
        assert 0 <= score_metrics(metrics).score <= 100


@pytest.mark.unit
def test_daily_heat_used_when_current_missing():
    breakdown = score_metrics(DerivedMetrics(heat_index_daily=100.0))

    assert breakdown.components.heat == 20.0
    assert breakdown.heat_driver == 100.0
    assert ADVICE_HIGH_HEAT in breakdown.advice


@pytest.mark.unit
def test_threshold_advice():
    metrics = DerivedMetrics(
        heat_index_current=101.0,
        recent_hot_day_count=3,
        hazards=HazardSummary(count=2, nearest_distance_km=12.0, category_histogram={"Floods": 2}),
        flood_flag=True,
        population_density=8000.0,
    )

    advice = score_metrics(metrics).advice

    assert advice == [
        ADVICE_HIGH_HEAT,
        ADVICE_HOT_DAYS,
        "Nearby hazards detected (2 in 100 km). Stay informed on local advisories.",
        ADVICE_HAZARD_NEAR,
        ADVICE_FLOOD,
        ADVICE_DENSE,
    ]


@pytest.mark.unit
def test_density_weight_scales_component():
    metrics = DerivedMetrics(population_density=500.0)

    full = score_metrics(metrics)
    half = score_metrics(metrics, ScoringConfig(density_weight=0.5))
    off = score_metrics(metrics, ScoringConfig(density_weight=0.0))

    assert full.components.density == 20.0
    assert half.components.density == 10.0
    assert off.components.density == 0.0
    assert full.score - half.score == 10


@pytest.mark.unit
def test_deterministic():
    metrics = DerivedMetrics(heat_index_current=92.0, population_density=2500.0)
    assert score_metrics(metrics) == score_metrics(metrics)
