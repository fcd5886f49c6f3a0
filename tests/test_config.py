"""Tests for configuration module."""

import pytest

from examgen.config import Environment, LLMProvider, QuotaAllocation, Settings


def test_default_settings():
    """Test that default settings are loaded correctly."""
    settings = Settings(_env_file=None)

    assert settings.llm_provider == LLMProvider.OLLAMA
    assert settings.environment == Environment.DEVELOPMENT
    assert settings.log_level == "INFO"
    assert settings.ollama_model == "gemma3:4b"
    assert settings.quota_allocation == QuotaAllocation.EVEN


def test_generation_defaults():
    """Test chunk budgets, retry and sampling defaults."""
    settings = Settings(_env_file=None)

    assert settings.max_tokens_per_chunk == 8000
    assert settings.min_tokens_per_chunk == 500
    assert settings.max_attempts == 3
    assert settings.retry_backoff_seconds == 3.0
    assert settings.retry_temperature < settings.temperature


def test_settings_from_environment(monkeypatch):
    """Test that environment variables override defaults."""
    monkeypatch.setenv("LLM_PROVIDER", "gemini")
    monkeypatch.setenv("GEMINI_API_KEY", "test-gemini-key")
    monkeypatch.setenv("QUOTA_ALLOCATION", "proportional")
    monkeypatch.setenv("SERVER_PORT", "8080")

    settings = Settings(_env_file=None)

    assert settings.llm_provider == LLMProvider.GEMINI
    assert settings.gemini_api_key == "test-gemini-key"
    assert settings.quota_allocation == QuotaAllocation.PROPORTIONAL
    assert settings.server_port == 8080


def test_validate_openai_config():
    """Test OpenAI configuration validation."""
    settings = Settings(_env_file=None, llm_provider=LLMProvider.OPENAI)

    with pytest.raises(ValueError, match="OpenAI API key is required"):
        settings.validate_provider_config()


def test_validate_gemini_config():
    """Test Gemini configuration validation."""
    settings = Settings(_env_file=None, llm_provider=LLMProvider.GEMINI)

    with pytest.raises(ValueError, match="Gemini API key is required"):
        settings.validate_provider_config()


def test_valid_openai_config():
    """Test valid OpenAI configuration."""
    settings = Settings(
        _env_file=None,
        llm_provider=LLMProvider.OPENAI,
        openai_api_key="sk-test-key",
    )

    # Should not raise
    settings.validate_provider_config()


def test_ollama_needs_no_key():
    """Test that the local backend validates without credentials."""
    settings = Settings(_env_file=None, llm_provider=LLMProvider.OLLAMA)

    settings.validate_provider_config()


def test_chunk_budgets_validated():
    """Test a chunk budget not above the minimum fails at load time."""
    with pytest.raises(ValueError, match="MAX_TOKENS_PER_CHUNK"):
        Settings(_env_file=None, max_tokens_per_chunk=400)


def test_chunk_budgets_from_environment(monkeypatch):
    """Test inconsistent budgets from the environment are rejected."""
    monkeypatch.setenv("MAX_TOKENS_PER_CHUNK", "300")
    monkeypatch.setenv("MIN_TOKENS_PER_CHUNK", "300")

    with pytest.raises(ValueError, match="greater than MIN_TOKENS_PER_CHUNK"):
        Settings(_env_file=None)
