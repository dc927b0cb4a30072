"""
Aggregation orchestrator.

One pass per request: open every source adapter, read them concurrently,
derive metrics, score, generate advice, assemble the ScoreResult. Adapters
are request-scoped and closed on exit; nothing is shared across requests
except read-only settings.
"""

import asyncio
import logging
from contextlib import AsyncExitStack
from dataclasses import dataclass
from typing import Callable, Optional

from earthscore.core.config import Settings, get_settings
from earthscore.core.geometry import Point
from earthscore.core.schemas import DerivedMetrics, PointOut, ScoreResult
from earthscore.engine.derivation import SourceObservations, derive_metrics
from earthscore.engine.scoring import ScoringConfig, score_metrics
from earthscore.narrative.generator import NarrativeGenerator
from earthscore.sources.eonet.client import HazardEventsClient
from earthscore.sources.nasa_power.client import DailyClimateClient, HourlyClimateClient
from earthscore.sources.nominatim.client import ReverseGeocodingClient
from earthscore.sources.open_meteo.client import RealtimeWeatherClient
from earthscore.sources.openaq.client import AirQualityStationClient
from earthscore.sources.sedac.client import PopulationDensityClient

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50
NEUTRAL_ADVICE = [
    "Temporary data issue: returning a neutral score.",
    "Try again in a moment; upstream services may be slow.",
]


@dataclass
class SourceAdapters:
    """The seven request-scoped adapters."""

    daily: DailyClimateClient
    hourly: HourlyClimateClient
    realtime: RealtimeWeatherClient
    hazards: HazardEventsClient
    density: PopulationDensityClient
    geocoder: ReverseGeocodingClient
    air_quality: AirQualityStationClient

    def all(self):
        return [
            self.daily,
            self.hourly,
            self.realtime,
            self.hazards,
            self.density,
            self.geocoder,
            self.air_quality,
        ]


def build_adapters(settings: Settings) -> SourceAdapters:
    timeout = settings.source_timeout_seconds
    return SourceAdapters(
        daily=DailyClimateClient(timeout=timeout),
        hourly=HourlyClimateClient(timeout=timeout),
        realtime=RealtimeWeatherClient(timeout=timeout),
        hazards=HazardEventsClient(limit=settings.eonet_event_limit, timeout=timeout),
        density=PopulationDensityClient(timeout=timeout),
        geocoder=ReverseGeocodingClient(timeout=timeout),
        air_quality=AirQualityStationClient(
            radii_km=settings.get_aq_search_radii_km(),
            api_key=settings.openaq_api_key,
            timeout=timeout,
        ),
    )


def neutral_score_result(point: Point, reason: str) -> ScoreResult:
    """Low-confidence result used when the pipeline itself fails."""
    return ScoreResult(
        input=PointOut(lat=point.latitude, lon=point.longitude),
        score=NEUTRAL_SCORE,
        advice=list(NEUTRAL_ADVICE),
        advice_source="rule",
        metrics=DerivedMetrics(),
        notes=[f"Score pipeline fault ({reason}); neutral score returned."],
    )


class LivabilityAggregator:
    """
    Drives adapters -> derivation -> scoring -> narrative.

    Usage:
        aggregator = LivabilityAggregator()
        result = await aggregator.score_point_safely(Point(64.1466, -21.9426))
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        adapter_factory: Optional[Callable[[Settings], SourceAdapters]] = None,
        narrator: Optional[NarrativeGenerator] = None,
        scoring_config: Optional[ScoringConfig] = None,
    ):
        self.settings = settings or get_settings()
        self.adapter_factory = adapter_factory or build_adapters
        self.narrator = narrator or NarrativeGenerator(
            self.settings.narrative_config(),
            enabled=self.settings.enable_generated_advice,
        )
        self.scoring_config = scoring_config or ScoringConfig(
            density_weight=self.settings.density_weight
        )

    async def collect(self, point: Point) -> SourceObservations:
        """Read every source concurrently; each settles to a payload or None."""
        adapters = self.adapter_factory(self.settings)
        async with AsyncExitStack() as stack:
            for adapter in adapters.all():
                await stack.enter_async_context(adapter)

            results = await asyncio.gather(
                adapters.daily.fetch(point),
                adapters.hourly.fetch(point),
                adapters.realtime.fetch(point),
                adapters.hazards.fetch(),
                adapters.density.fetch(point),
                adapters.geocoder.fetch(point),
                adapters.air_quality.fetch(point),
                return_exceptions=True,
            )

        settled = []
        for adapter, result in zip(adapters.all(), results):
            if isinstance(result, Exception):
                logger.error(f"[{adapter.SOURCE_NAME}] fetch raised {type(result).__name__}: {result}")
                result = None
            settled.append(result)
        daily, hourly, realtime, hazards, density, settlement, air_quality = settled

        return SourceObservations(
            daily=daily,
            hourly=hourly,
            realtime=realtime,
            hazards=hazards,
            population_density=density,
            settlement=settlement,
            air_quality=air_quality,
        )

    async def score(self, point: Point) -> ScoreResult:
        observations = await self.collect(point)
        derived = derive_metrics(point, observations)
        breakdown = score_metrics(derived.metrics, self.scoring_config)
        narrative = await self.narrator.generate(
            point, derived.metrics, breakdown, derived.notes
        )

        if derived.notes:
            logger.info(
                f"Scored ({point.latitude:.4f}, {point.longitude:.4f}) = {breakdown.score} "
                f"with {len(derived.notes)} degraded source(s)"
            )

        return ScoreResult(
            input=PointOut(lat=point.latitude, lon=point.longitude),
            score=breakdown.score,
            heat_risk=breakdown.heat_risk,
            components=breakdown.components,
            advice=narrative.advice,
            advice_source=narrative.source,
            metrics=derived.metrics,
            notes=derived.notes,
        )

    async def score_point_safely(self, point: Point) -> ScoreResult:
        """
        Score a point; any unexpected fault becomes the neutral result.
        """
        try:
            return await self.score(point)
        except Exception as e:
            logger.exception(f"Score pipeline failed for {point}: {e}")
            return neutral_score_result(point, type(e).__name__)
