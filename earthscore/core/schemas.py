"""
Pydantic schemas for API requests and responses.

Field names are snake_case in Python and camelCase on the wire.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

HeatIndexSource = Literal["realtime-weather", "hourly-climate", "daily-climate"]
AdviceSource = Literal["generated", "rule"]

MAX_HISTORY_TURNS = 10


def to_camel(name: str) -> str:
    """snake_case -> camelCase, leaving digit groups untouched (max_24h -> max24h)."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False
    )


class PointOut(CamelModel):
    lat: float
    lon: float


class HazardSummary(CamelModel):
    """Open hazard events within 100 km of the point."""
    count: int = 0
    nearest_distance_km: Optional[float] = None
    category_histogram: Dict[str, int] = Field(default_factory=dict)


class ObservedAirQuality(CamelModel):
    """Latest station PM2.5 reading, when a station is within search radius."""
    pm25: Optional[float] = None
    us_aqi: Optional[int] = None
    category: Optional[str] = None
    station_name: Optional[str] = None
    distance_km: Optional[float] = None
    observed_at: Optional[str] = None


class CurrentConditions(CamelModel):
    temperature_f: Optional[float] = None
    relative_humidity: Optional[float] = None
    wind_speed_kmh: Optional[float] = None
    precipitation_mm: Optional[float] = None
    cloud_cover_pct: Optional[float] = None
    uv_index: Optional[float] = None
    observed_at: Optional[str] = None


class DerivedMetrics(CamelModel):
    """
    Typed signals derived from upstream observations.

    Every numeric field is either a finite number or None; None means the
    signal could not be derived and is never the same as zero.
    """
    heat_index_daily: Optional[float] = None
    heat_index_current: Optional[float] = None
    heat_index_current_source: Optional[HeatIndexSource] = None
    heat_index_max_24h: Optional[float] = None
    recent_hot_day_count: int = 0

    population_density: Optional[float] = None

    hazards: Optional[HazardSummary] = None
    air_quality_proxy: Optional[int] = Field(default=None, ge=0, le=100)
    air_quality_observed: Optional[ObservedAirQuality] = None

    settlement_class: Optional[str] = None
    settlement_name: Optional[str] = None
    flood_flag: bool = False

    current_conditions: Optional[CurrentConditions] = None


class ScoreComponents(CamelModel):
    baseline: float
    heat: float
    hazard: float
    density: float


class ScoreResult(CamelModel):
    """The scoring endpoint's only artifact."""
    input: PointOut
    score: int = Field(..., ge=0, le=100)
    heat_risk: Optional[str] = None
    components: Optional[ScoreComponents] = None
    advice: List[str]
    advice_source: AdviceSource = "rule"
    metrics: DerivedMetrics = Field(default_factory=DerivedMetrics)
    notes: List[str] = Field(default_factory=list)


class ChatTurn(CamelModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(CamelModel):
    """Request schema for the conversational endpoint."""
    question: str = Field(..., description="Free-form question about the location")
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lon: Optional[float] = Field(None, ge=-180, le=180)
    context: Dict[str, Any] = Field(
        default_factory=dict,
        description="Metrics object returned by the score endpoint"
    )
    history: List[ChatTurn] = Field(
        default_factory=list,
        description="Prior turns, oldest first; only the last 10 are used"
    )
    mode: Literal["qa", "explain"] = "qa"

    @field_validator("question")
    @classmethod
    def validate_question(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("question cannot be empty")
        return v

    @field_validator("history")
    @classmethod
    def cap_history(cls, v: List[ChatTurn]) -> List[ChatTurn]:
        return v[-MAX_HISTORY_TURNS:]


class ChatResponse(CamelModel):
    answer: str
    provider_used: str


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None
