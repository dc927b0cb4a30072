"""
Standardized error classification system.

Upstream errors are raised inside the HTTP client and recovered at each
adapter boundary; input, configuration and provider errors are the only
ones that reach the HTTP surface.
"""

from typing import Optional, Dict, Any, List


class APIError(Exception):
    """
    Base exception for all API-related errors.

    Attributes:
        message: Human-readable error description
        source: Upstream source name (e.g., 'nasa_power', 'eonet')
        status_code: HTTP status code if applicable
        response_data: Raw response data for debugging
        retryable: Whether the failure is transient
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        status_code: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.source = source
        self.status_code = status_code
        self.response_data = response_data
        self.retryable = retryable

    def __str__(self) -> str:
        parts = [self.message]
        if self.source:
            parts.insert(0, f"[{self.source}]")
        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "source": self.source,
            "status_code": self.status_code,
            "retryable": self.retryable,
            "response_data": self.response_data,
        }


class UpstreamError(APIError):
    """
    An upstream feed could not be read.

    Examples:
    - Network failure or timeout
    - Non-success HTTP status
    - Body that is not valid JSON
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        status_code: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            source=source,
            status_code=status_code,
            response_data=response_data,
            retryable=status_code is None or status_code >= 500 or status_code == 429,
        )


class UpstreamTimeoutError(UpstreamError):
    """The call did not settle before its deadline."""

    def __init__(self, source: Optional[str] = None, timeout: Optional[float] = None):
        message = "Request timed out"
        if timeout is not None:
            message = f"Request timed out after {timeout:.1f}s"
        super().__init__(message=message, source=source)
        self.timeout = timeout


class InvalidPointError(APIError):
    """
    Query coordinates are not usable.

    Raised before any adapter is invoked.
    """

    def __init__(self, message: str = "Invalid lat/lon"):
        super().__init__(message=message, status_code=400, retryable=False)


class ConfigurationError(APIError):
    """
    Configuration error - missing required settings.
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        missing_config: Optional[str] = None,
    ):
        super().__init__(
            message=message, source=source, status_code=None, response_data=None
        )
        self.missing_config = missing_config


class MissingProviderConfigError(ConfigurationError):
    """No text-generation provider credential is configured."""

    def __init__(self):
        super().__init__(
            message=(
                "No text-generation provider configured. "
                "Set OPENAI_API_KEY or ANTHROPIC_API_KEY."
            ),
            source="chat",
            missing_config="OPENAI_API_KEY",
        )


class ProviderExhaustedError(APIError):
    """
    Every provider/model in the cascade failed.

    Attributes:
        reasons: one failure description per attempt, in order
    """

    MAX_DETAIL_CHARS = 1200

    def __init__(self, reasons: List[str], source: Optional[str] = "chat"):
        super().__init__(
            message="All text-generation providers failed",
            source=source,
            retryable=True,
        )
        self.reasons = list(reasons)

    @property
    def detail(self) -> str:
        """Bounded diagnostic string, latest failure first."""
        text = " | ".join(reversed(self.reasons)) or "Unknown error"
        return text[: self.MAX_DETAIL_CHARS]


def classify_http_error(
    status_code: int, response_text: str = "", source: Optional[str] = None
) -> UpstreamError:
    """
    Classify an HTTP error status from an upstream feed.

    Args:
        status_code: HTTP status code
        response_text: Response body text
        source: Upstream source name

    Returns:
        UpstreamError with a status-specific message
    """
    snippet = response_text[:200]
    if status_code == 429:
        message = f"Rate limited: {snippet}"
    elif status_code in (401, 403):
        message = f"Access denied: {snippet}"
    elif status_code == 404:
        message = f"Not found: {snippet}"
    elif status_code == 400:
        message = f"Bad request: {snippet}"
    elif 500 <= status_code < 600:
        message = f"Server error: {snippet}"
    else:
        message = f"HTTP error {status_code}: {snippet}"
    return UpstreamError(message=message, source=source, status_code=status_code)
