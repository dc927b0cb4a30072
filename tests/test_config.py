"""
Unit tests for configuration module.

Tests run WITHOUT .env file and WITHOUT API keys.
"""
import pytest

from earthscore.core.config import Settings, get_settings, reset_settings


@pytest.mark.unit
def test_config_starts_without_any_keys(clean_env):
    """Every provider key is optional for app startup."""
    settings = Settings(_env_file=None)

    assert settings.openai_api_key is None
    assert settings.anthropic_api_key is None
    assert settings.openaq_api_key is None


@pytest.mark.unit
def test_config_defaults(clean_env):
    """Test default values for optional settings."""
    settings = Settings(_env_file=None)

    assert settings.openai_model == "gpt-4o-mini"
    assert settings.anthropic_model == "claude-3-5-haiku-20241022"
    assert settings.source_timeout_seconds == 9.0
    assert settings.llm_timeout_seconds == 12.0
    assert settings.llm_max_tokens == 300
    assert settings.llm_temperature == 0.3
    assert settings.eonet_event_limit == 200
    assert settings.density_weight == 1.0
    assert settings.enable_generated_advice is True
    assert settings.log_level == "INFO"
    assert settings.run_integration_tests is False


@pytest.mark.unit
def test_config_custom_values(clean_env, monkeypatch):
    """Test custom values from environment."""
    monkeypatch.setenv("SOURCE_TIMEOUT_SECONDS", "4.5")
    monkeypatch.setenv("DENSITY_WEIGHT", "0.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("EONET_EVENT_LIMIT", "50")

    settings = Settings(_env_file=None)

    assert settings.source_timeout_seconds == 4.5
    assert settings.density_weight == 0.5
    assert settings.log_level == "DEBUG"
    assert settings.eonet_event_limit == 50


@pytest.mark.unit
def test_config_invalid_log_level(clean_env, monkeypatch):
    """Invalid log level should raise validation error."""
    monkeypatch.setenv("LOG_LEVEL", "INVALID")

    with pytest.raises(Exception):
        Settings(_env_file=None)


@pytest.mark.unit
def test_config_density_weight_bounds(clean_env, monkeypatch):
    """Density weight is bounded to [0, 2]."""
    monkeypatch.setenv("DENSITY_WEIGHT", "3")

    with pytest.raises(Exception):
        Settings(_env_file=None)


@pytest.mark.unit
def test_config_source_timeout_bounds(clean_env, monkeypatch):
    monkeypatch.setenv("SOURCE_TIMEOUT_SECONDS", "0")

    with pytest.raises(Exception):
        Settings(_env_file=None)


@pytest.mark.unit
def test_aq_search_radii_parsing(clean_env, monkeypatch):
    monkeypatch.setenv("AQ_SEARCH_RADII_KM", "25, 75,150")

    settings = Settings(_env_file=None)

    assert settings.get_aq_search_radii_km() == [25.0, 75.0, 150.0]


@pytest.mark.unit
def test_aq_search_radii_rejects_non_positive(clean_env, monkeypatch):
    monkeypatch.setenv("AQ_SEARCH_RADII_KM", "50,-10")

    with pytest.raises(Exception):
        Settings(_env_file=None)


@pytest.mark.unit
def test_openai_models_primary_then_fallbacks(clean_env):
    """Primary model first; gpt-4o-mini is not repeated as a fallback."""
    settings = Settings(_env_file=None)

    assert settings.get_openai_models() == ["gpt-4o-mini", "gpt-3.5-turbo"]


@pytest.mark.unit
def test_openai_models_custom_primary(clean_env, monkeypatch):
    monkeypatch.setenv("OPENAI_MODEL", "gpt-3.5-turbo")

    settings = Settings(_env_file=None)

    assert settings.get_openai_models() == ["gpt-3.5-turbo", "gpt-4o-mini"]


@pytest.mark.unit
def test_narrative_config_without_credentials(clean_env):
    config = Settings(_env_file=None).narrative_config()

    assert config.has_credentials is False
    assert config.provider_credentials == {}
    assert config.model_preferences == {}


@pytest.mark.unit
def test_narrative_config_with_both_providers(clean_env, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")
    monkeypatch.setenv("LLM_TIMEOUT_SECONDS", "5")

    config = Settings(_env_file=None).narrative_config()

    assert config.has_credentials is True
    assert config.provider_credentials == {"openai": "sk-test", "anthropic": "sk-ant-test"}
    assert config.model_preferences["openai"] == ("gpt-4o-mini", "gpt-3.5-turbo")
    assert config.model_preferences["anthropic"] == ("claude-3-5-haiku-20241022",)
    assert config.timeout_seconds == 5.0
    assert config.max_tokens == 300


@pytest.mark.unit
def test_get_settings_singleton(clean_env):
    """Test settings singleton pattern."""
    settings1 = get_settings()
    settings2 = get_settings()

    assert settings1 is settings2

    reset_settings()
    settings3 = get_settings()

    assert settings3 is not settings1
