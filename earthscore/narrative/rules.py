"""
Rule-based narrative: a fixed sequence of conditionals over derived metrics.

Always available, no external dependency. Each rule contributes at most one
sentence; degradation notes come last with a "Note: " prefix.
"""
from typing import List

from earthscore.core.schemas import DerivedMetrics
from earthscore.engine.scoring import ADVICE_NO_CONCERNS, ScoreBreakdown, heat_driver

NOTE_PREFIX = "Note: "

SETTLEMENT_SENTENCES = {
    "city": "This point sits in a city; services are close but urban heat and traffic add up.",
    "town": "This point is in a town, typically a balance of services and open space.",
    "village": "This point is in a village; expect quieter surroundings and longer trips to services.",
    "hamlet": "This point is in a hamlet; services and emergency response may be far away.",
    "suburb": "This point is in a suburb of a larger settlement.",
    "isolated_dwelling": "This point is very remote; plan for limited services and slower emergency response.",
}


def _settlement_sentence(metrics: DerivedMetrics) -> str:
    cls = metrics.settlement_class
    if cls in SETTLEMENT_SENTENCES:
        sentence = SETTLEMENT_SENTENCES[cls]
        if metrics.settlement_name:
            sentence = f"{metrics.settlement_name}: {sentence[0].lower()}{sentence[1:]}"
        return sentence
    label = metrics.settlement_name or cls
    return f"Nearest named place: {label}."


def _heat_sentence(hi: float) -> str:
    if hi >= 105:
        return (
            "Severe heat burden detected. Expect hazardous mid-day conditions; "
            "prioritize indoor cooling and hydration."
        )
    if hi >= 95:
        return "Elevated heat conditions likely; plan outdoor activities for mornings or evenings."
    return "Heat levels appear manageable for typical outdoor activities."


def _hazard_sentence(metrics: DerivedMetrics) -> str:
    hazards = metrics.hazards
    if hazards is None or hazards.count == 0:
        return "No recent hazard activity detected within 100 km."

    top = sorted(hazards.category_histogram.items(), key=lambda kv: (-kv[1], kv[0]))[:2]
    cats = ", ".join(f"{name.lower()} ({n})" for name, n in top) or "varied types"
    near = ""
    if hazards.nearest_distance_km is not None:
        near = f" The nearest recent event is about {round(hazards.nearest_distance_km)} km away."
    return f"Recent hazards nearby: {hazards.count} open events, mostly {cats}.{near}"


def _density_sentence(density: float) -> str:
    if density > 10000:
        return "This area is very dense; expect urban noise, traffic, and fewer green buffers."
    if density > 3000:
        return "Moderate-to-high density suggests good access to services with some crowding."
    return "Lower density may offer quieter living with more open space."


def _proxy_sentence(proxy: int) -> str:
    if proxy < 40:
        return (
            "Air quality risks are elevated due to nearby smoke or dust sources; "
            "consider indoor air filtration."
        )
    if proxy < 70:
        return "Mild air quality concerns are possible; check daily conditions if sensitive."
    return "Air quality signals look favorable at this time."


def _observed_sentence(metrics: DerivedMetrics) -> str:
    aq = metrics.air_quality_observed
    where = ""
    if aq.station_name and aq.distance_km is not None:
        where = f" at {aq.station_name} ({aq.distance_km:g} km away)"
    if aq.us_aqi is None:
        return f"A nearby station{where} reports PM2.5 of {aq.pm25:g} µg/m³."
    if aq.us_aqi > 150:
        advice = "limit time outdoors and keep windows closed."
    elif aq.us_aqi > 100:
        advice = "sensitive groups should reduce prolonged outdoor exertion."
    elif aq.us_aqi > 50:
        advice = "acceptable for most people."
    else:
        advice = "good."
    return f"Measured fine-particle air quality{where} is AQI {aq.us_aqi}: {advice}"


def build_narrative(metrics: DerivedMetrics, notes: List[str]) -> List[str]:
    """
    Narrative sentences in a fixed order: settlement, heat, hazards, floods,
    density, air-quality proxy, observed air quality, then notes.
    """
    narrative: List[str] = []

    if metrics.settlement_class or metrics.settlement_name:
        narrative.append(_settlement_sentence(metrics))

    hi = heat_driver(metrics)
    if hi is not None:
        narrative.append(_heat_sentence(hi))

    narrative.append(_hazard_sentence(metrics))
    if metrics.flood_flag:
        narrative.append("Flooding is among the nearby events; check whether the area is low-lying.")

    if metrics.population_density is not None:
        narrative.append(_density_sentence(metrics.population_density))

    if metrics.air_quality_proxy is not None:
        narrative.append(_proxy_sentence(metrics.air_quality_proxy))

    if metrics.air_quality_observed is not None and metrics.air_quality_observed.pm25 is not None:
        narrative.append(_observed_sentence(metrics))

    narrative.extend(f"{NOTE_PREFIX}{note}" for note in notes)
    return narrative


def rule_based_advice(breakdown: ScoreBreakdown, metrics: DerivedMetrics, notes: List[str]) -> List[str]:
    """Threshold advice (or the no-concerns line) followed by the narrative."""
    advice = list(breakdown.advice) or [ADVICE_NO_CONCERNS]
    return advice + build_narrative(metrics, notes)
