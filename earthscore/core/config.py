"""
Configuration module with strict validation.

Key principles:
- APP STARTUP does NOT require any API key
- Generated advice and chat DO require a text-generation provider key
  (chat fails early with a clear error, scoring silently falls back to rules)
- All timeouts and scoring weights are configurable
- Safe defaults for all optional settings
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class NarrativeConfig:
    """
    Read-only provider configuration handed to the narrative generator and
    the chat service at construction time.

    Attributes:
        provider_credentials: provider name -> API key (only configured providers)
        model_preferences: provider name -> ordered model names (primary first)
        timeout_seconds: outer timeout for each provider attempt
        max_tokens: completion size limit
        temperature: sampling temperature
    """

    provider_credentials: Dict[str, str] = field(default_factory=dict)
    model_preferences: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    timeout_seconds: float = 12.0
    max_tokens: int = 300
    temperature: float = 0.3

    @property
    def has_credentials(self) -> bool:
        return any(self.provider_credentials.values())


class Settings(BaseSettings):
    """Application settings with validation.

    Loads from environment variables and .env file.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # OpenAI (OPTIONAL - enables generated advice and chat)
    openai_api_key: Optional[str] = Field(
        default=None,
        description="OpenAI API key - primary text-generation provider"
    )

    openai_model: str = Field(
        default="gpt-4o-mini",
        description="Primary OpenAI model"
    )

    openai_fallback_models: str = Field(
        default="gpt-3.5-turbo,gpt-4o-mini",
        description="Comma-separated same-provider fallback models, tried in order"
    )

    # Anthropic (OPTIONAL - second independent provider)
    anthropic_api_key: Optional[str] = Field(
        default=None,
        description="Anthropic API key - fallback provider after all OpenAI models"
    )

    anthropic_model: str = Field(
        default="claude-3-5-haiku-20241022",
        description="Anthropic model used as last resort"
    )

    # OpenAQ (OPTIONAL - enables observed air quality)
    openaq_api_key: Optional[str] = Field(
        default=None,
        description="OpenAQ v3 API key - station lookup is skipped without it"
    )

    # Upstream fetch behaviour
    source_timeout_seconds: float = Field(
        default=9.0,
        ge=1.0,
        le=60.0,
        description="Deadline for each upstream source call"
    )

    eonet_event_limit: int = Field(
        default=200,
        ge=1,
        le=1000,
        description="Maximum number of open EONET events to scan"
    )

    aq_search_radii_km: str = Field(
        default="50,100",
        description="Comma-separated air-quality station search radii, innermost first"
    )

    # Text generation
    llm_timeout_seconds: float = Field(
        default=12.0,
        ge=1.0,
        le=120.0,
        description="Outer timeout for each provider attempt"
    )

    llm_max_tokens: int = Field(
        default=300,
        ge=16,
        le=4000,
        description="Maximum completion tokens"
    )

    llm_temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Sampling temperature"
    )

    enable_generated_advice: bool = Field(
        default=True,
        description="Ask a provider for bullet-point advice when credentials exist"
    )

    # Scoring
    density_weight: float = Field(
        default=1.0,
        ge=0.0,
        le=2.0,
        description="Multiplier applied to the population-density component"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # Testing
    run_integration_tests: bool = Field(
        default=False,
        description="Enable integration tests (requires network)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper

    @field_validator("aq_search_radii_km")
    @classmethod
    def validate_radii(cls, v: str) -> str:
        """Radii must be positive numbers."""
        for part in v.split(","):
            if part.strip() and float(part) <= 0:
                raise ValueError("aq_search_radii_km entries must be positive")
        return v

    def get_aq_search_radii_km(self) -> List[float]:
        """Parsed air-quality search tiers, innermost first."""
        return [float(p) for p in self.aq_search_radii_km.split(",") if p.strip()]

    def get_openai_models(self) -> List[str]:
        """
        Primary OpenAI model followed by its fallbacks, duplicates removed.

        Returns:
            List[str]: model names in the order they are tried
        """
        models = [self.openai_model]
        for name in self.openai_fallback_models.split(","):
            name = name.strip()
            if name and name not in models:
                models.append(name)
        return models

    def narrative_config(self) -> NarrativeConfig:
        """
        Build the explicit provider configuration for narrative and chat.

        Only providers with a key are included, so an empty credentials map
        means "no provider configured".
        """
        credentials: Dict[str, str] = {}
        models: Dict[str, Tuple[str, ...]] = {}
        if self.openai_api_key:
            credentials["openai"] = self.openai_api_key
            models["openai"] = tuple(self.get_openai_models())
        if self.anthropic_api_key:
            credentials["anthropic"] = self.anthropic_api_key
            models["anthropic"] = (self.anthropic_model,)
        return NarrativeConfig(
            provider_credentials=credentials,
            model_preferences=models,
            timeout_seconds=self.llm_timeout_seconds,
            max_tokens=self.llm_max_tokens,
            temperature=self.llm_temperature,
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or create the global settings instance.

    This pattern allows:
    - Easy testing (can reset settings between tests)
    - Lazy loading (only loads when first accessed)
    - Singleton pattern (same instance used everywhere)
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """
    Reset the global settings instance.

    Useful for testing to ensure clean state between tests.
    """
    global _settings
    _settings = None
