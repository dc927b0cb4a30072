"""
Unit tests for the error classification module.
"""
import pytest

from earthscore.core.api_errors import (
    APIError,
    InvalidPointError,
    MissingProviderConfigError,
    ProviderExhaustedError,
    UpstreamError,
    UpstreamTimeoutError,
    classify_http_error,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "status,prefix,retryable",
    [
        (429, "Rate limited", True),
        (401, "Access denied", False),
        (403, "Access denied", False),
        (404, "Not found", False),
        (400, "Bad request", False),
        (503, "Server error", True),
        (418, "HTTP error 418", False),
    ],
)
def test_classify_http_error(status, prefix, retryable):
    error = classify_http_error(status, "body text", source="eonet")

    assert isinstance(error, UpstreamError)
    assert error.message.startswith(prefix)
    assert error.status_code == status
    assert error.retryable is retryable
    assert str(error).startswith("[eonet]")


@pytest.mark.unit
def test_response_text_truncated():
    error = classify_http_error(500, "x" * 1000)
    assert len(error.message) < 250


@pytest.mark.unit
def test_timeout_error():
    error = UpstreamTimeoutError(source="sedac", timeout=9.0)

    assert "9.0s" in error.message
    assert error.retryable is True
    assert error.to_dict()["error_type"] == "UpstreamTimeoutError"


@pytest.mark.unit
def test_invalid_point_error_defaults():
    error = InvalidPointError()

    assert isinstance(error, APIError)
    assert error.message == "Invalid lat/lon"
    assert error.status_code == 400


@pytest.mark.unit
def test_missing_provider_config():
    error = MissingProviderConfigError()

    assert error.missing_config == "OPENAI_API_KEY"
    assert "ANTHROPIC_API_KEY" in error.message


@pytest.mark.unit
def test_exhausted_detail_latest_first():
    error = ProviderExhaustedError(["first: boom", "second: empty response"])
    assert error.detail == "second: empty response | first: boom"


@pytest.mark.unit
def test_exhausted_detail_without_reasons():
    assert ProviderExhaustedError([]).detail == "Unknown error"
