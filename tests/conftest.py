"""
Pytest configuration and shared fixtures.
"""
import json

import httpx
import pytest

from earthscore.core.config import reset_settings
from earthscore.core.geometry import Point


@pytest.fixture(scope="function")
def clean_env(monkeypatch):
    """
    Clean environment for testing.

    Removes all app-related env vars to ensure clean state.
    """
    env_vars = [
        "OPENAI_API_KEY",
        "OPENAI_MODEL",
        "OPENAI_FALLBACK_MODELS",
        "ANTHROPIC_API_KEY",
        "ANTHROPIC_MODEL",
        "OPENAQ_API_KEY",
        "SOURCE_TIMEOUT_SECONDS",
        "EONET_EVENT_LIMIT",
        "AQ_SEARCH_RADII_KM",
        "LLM_TIMEOUT_SECONDS",
        "LLM_MAX_TOKENS",
        "LLM_TEMPERATURE",
        "ENABLE_GENERATED_ADVICE",
        "DENSITY_WEIGHT",
        "LOG_LEVEL",
        "RUN_INTEGRATION_TESTS",
    ]
    for var in env_vars:
        monkeypatch.delenv(var, raising=False)

    # Reset settings singleton
    reset_settings()

    yield

    # Reset again after test
    reset_settings()


@pytest.fixture
def reykjavik():
    return Point(64.1466, -21.9426)


@pytest.fixture
def json_transport():
    """
    Factory for an httpx.MockTransport answering every request with the
    same JSON body. When ``requests`` is a list, each request is appended.
    """
    def make(payload, status_code=200, requests=None):
        def handler(request: httpx.Request) -> httpx.Response:
            if requests is not None:
                requests.append(request)
            return httpx.Response(status_code, text=json.dumps(payload))

        return httpx.MockTransport(handler)

    return make


@pytest.fixture
def power_daily_payload():
    """Factory for a NASA POWER daily document from ordered daily maxima (°C)."""
    def make(t_max_c, rh=None):
        days = [f"2024070{i + 1}" for i in range(len(t_max_c))]
        rh = rh if rh is not None else [50.0] * len(t_max_c)
        return {
            "type": "Feature",
            "properties": {
                "parameter": {
                    "T2M_MAX": dict(zip(days, t_max_c)),
                    "RH2M": dict(zip(days, rh)),
                }
            },
        }

    return make


@pytest.fixture
def eonet_event():
    """Factory for one open EONET event with a Point geometry."""
    def make(event_id, category, lon, lat, title="Event"):
        return {
            "id": event_id,
            "title": title,
            "categories": [{"id": category.lower(), "title": category}],
            "geometry": [
                {"date": "2024-07-01T00:00:00Z", "type": "Point", "coordinates": [lon, lat]}
            ],
        }

    return make
