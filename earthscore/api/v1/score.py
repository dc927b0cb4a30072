"""
Livability score endpoint.

GET /score?lat=..&lon=.. always answers 200 for a valid point: upstream
failures degrade the result (notes, rule-based advice, neutral score)
rather than the status code. Only unusable coordinates produce a 400.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from earthscore.core.api_errors import InvalidPointError
from earthscore.core.geometry import Point
from earthscore.core.schemas import ErrorResponse, ScoreResult
from earthscore.engine.aggregator import LivabilityAggregator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["score"])

CACHE_CONTROL = "s-maxage=600, stale-while-revalidate=600"


def get_aggregator() -> LivabilityAggregator:
    """Request-scoped aggregator; override in tests."""
    return LivabilityAggregator()


@router.get(
    "/score",
    response_model=ScoreResult,
    response_model_by_alias=True,
    responses={400: {"model": ErrorResponse}},
)
async def get_score(
    lat: Optional[str] = Query(None, description="Latitude in decimal degrees", examples=["64.1466"]),
    lon: Optional[str] = Query(None, description="Longitude in decimal degrees", examples=["-21.9426"]),
    aggregator: LivabilityAggregator = Depends(get_aggregator),
):
    """
    Score how livable a point is right now.

    **Signals:**
    - Heat index (NASA POWER daily and hourly, Open-Meteo current)
    - Open natural hazard events within 100 km (NASA EONET)
    - Population density (SEDAC GPWv4)
    - Settlement name and class (Nominatim)
    - Observed PM2.5 when an OpenAQ key is configured

    **No API key required** for the score itself.
    """
    try:
        point = Point.parse(lat, lon)
    except InvalidPointError as e:
        logger.info(f"Rejected score request lat={lat!r} lon={lon!r}: {e.message}")
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="Invalid lat/lon", detail=e.message).model_dump(),
        )

    result = await aggregator.score_point_safely(point)
    return JSONResponse(
        content=result.model_dump(mode="json", by_alias=True),
        headers={"Cache-Control": CACHE_CONTROL},
    )
