"""
Prompt templates for generated advice and the conversational endpoint.
"""
import json
from typing import Any, Dict, Optional

ADVICE_SYSTEM_PROMPT = (
    "You summarize how livable a location is right now from Earth observation "
    "signals: heat index, open natural hazard events (NASA EONET), an air-quality "
    "proxy derived from smoke, dust and volcanic sources, observed PM2.5 when a "
    "station is nearby, and population density. Write 3 to 6 short, practical "
    "bullet points, one per line, each starting with '- '. Do not invent facts "
    "that are not in the metrics."
)

QA_SYSTEM_PROMPT = (
    "You are an assistant that answers questions about a location using NASA "
    "Earth observation context. Be concise, factual and practical. Prefer "
    "referencing heat, recent hazards (EONET), the air-quality proxy (from "
    "smoke/dust/volcano proximity), observed air quality and population density. "
    "Where needed, explain the limits of the data. Avoid making up specifics "
    "beyond the provided context."
)

EXPLAIN_SYSTEM_PROMPT = (
    "You explain a location's livability score in depth. The score starts from a "
    "baseline of 10 and adds a heat component (up to 40), a hazard component "
    "(up to 30) and a population-density component (up to 20). Walk through "
    "each component using the provided metrics, say which signals were missing "
    "and how that affects confidence, and finish with concrete suggestions. "
    "Use only the provided context."
)


def _dump(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2, sort_keys=True, default=str)


def build_advice_prompt(
    lat: float,
    lon: float,
    score: int,
    metrics: Dict[str, Any],
    notes: Optional[list] = None,
) -> str:
    lines = [
        f"Location: lat {lat:.4f}, lon {lon:.4f}",
        f"Livability score: {score}/100",
        f"Metrics: {_dump(metrics)}",
    ]
    if notes:
        lines.append("Data caveats: " + "; ".join(notes))
    lines.append("Give 3-6 bullet points of advice for someone living here.")
    return "\n".join(lines)


def build_chat_prompt(
    question: str,
    lat: Optional[float],
    lon: Optional[float],
    context: Dict[str, Any],
) -> str:
    return f"Question: {question}\nLat: {lat}\nLon: {lon}\nContext: {_dump(context or {})}"


def system_prompt_for(mode: str) -> str:
    return EXPLAIN_SYSTEM_PROMPT if mode == "explain" else QA_SYSTEM_PROMPT
