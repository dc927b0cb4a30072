"""
Narrative generator: generated bullet-point advice with rule-based fallback.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from earthscore.core.config import NarrativeConfig
from earthscore.core.geometry import Point
from earthscore.core.schemas import AdviceSource, DerivedMetrics
from earthscore.engine.scoring import ScoreBreakdown
from earthscore.narrative.cascade import ProviderCascade, build_cascade
from earthscore.narrative.prompts import ADVICE_SYSTEM_PROMPT, build_advice_prompt
from earthscore.narrative.rules import build_narrative, rule_based_advice

logger = logging.getLogger(__name__)

MAX_BULLETS = 6

_BULLET_RE = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+(.*\S)\s*$")


@dataclass
class NarrativeResult:
    advice: List[str]
    source: AdviceSource


def parse_bullets(text: str) -> List[str]:
    """
    Bullet items from generated text.

    Marked lines ("- ", "* ", "• ", "1. ") win; when nothing is marked every
    non-empty line counts. At most six items are kept.
    """
    lines = [line for line in (text or "").splitlines() if line.strip()]
    marked = [m.group(1) for m in (_BULLET_RE.match(line) for line in lines) if m]
    items = marked or [line.strip() for line in lines]
    return [item.strip("*_ ") for item in items if item.strip("*_ ")][:MAX_BULLETS]


class NarrativeGenerator:
    """
    Produces the advice list for a score.

    Generated path when credentials are configured; rule-based otherwise or
    on any provider failure.
    """

    def __init__(
        self,
        config: NarrativeConfig,
        enabled: bool = True,
        cascade_factory: Callable[[NarrativeConfig], ProviderCascade] = build_cascade,
    ):
        self.config = config
        self.enabled = enabled
        self.cascade_factory = cascade_factory

    @property
    def can_generate(self) -> bool:
        return self.enabled and self.config.has_credentials

    async def generate(
        self,
        point: Point,
        metrics: DerivedMetrics,
        breakdown: ScoreBreakdown,
        notes: List[str],
    ) -> NarrativeResult:
        rule_advice = rule_based_advice(breakdown, metrics, notes)
        if not self.can_generate:
            return NarrativeResult(advice=rule_advice, source="rule")

        try:
            bullets = await self._generated_bullets(point, metrics, breakdown, notes)
        except Exception as e:
            logger.warning(f"Generated advice failed: {e}")
            bullets = None
        if not bullets:
            return NarrativeResult(advice=rule_advice, source="rule")

        return NarrativeResult(advice=bullets + build_narrative(metrics, notes), source="generated")

    async def _generated_bullets(
        self,
        point: Point,
        metrics: DerivedMetrics,
        breakdown: ScoreBreakdown,
        notes: List[str],
    ) -> Optional[List[str]]:
        prompt = build_advice_prompt(
            point.latitude,
            point.longitude,
            breakdown.score,
            metrics.model_dump(by_alias=True, exclude_none=True),
            notes,
        )
        cascade = self.cascade_factory(self.config)
        try:
            result = await cascade.run(prompt, system_prompt=ADVICE_SYSTEM_PROMPT)
        finally:
            await cascade.aclose()

        if not result.ok:
            logger.info(
                f"Generated advice unavailable after {len(result.reasons)} attempts; using rules"
            )
            return None

        bullets = parse_bullets(result.payload)
        if not bullets:
            logger.info(f"{result.provider_id} returned no usable bullets; using rules")
            return None
        return bullets
