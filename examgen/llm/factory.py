"""Factory for creating completion providers from configuration."""

from examgen.config import LLMProvider as LLMProviderEnum
from examgen.config import Settings, get_settings
from examgen.errors import InvalidRequest
from examgen.llm.base import LLMProvider, LLMProviderFactory


def create_llm_provider(
    provider_name: str | None = None, settings: Settings | None = None
) -> LLMProvider:
    """Create a completion provider from configuration.

    Called once by the composition root; the instance is then passed to the
    question generator.

    Args:
        provider_name: Override provider name, defaults to settings.llm_provider
        settings: Settings to read, defaults to the loaded application settings

    Returns:
        Configured LLM provider instance

    Raises:
        InvalidRequest: If the selected hosted provider has no API key
        ValueError: If the provider name is unknown
    """
    settings = settings or get_settings()
    provider_name = provider_name or settings.llm_provider

    # Build provider-specific config
    if provider_name == LLMProviderEnum.OLLAMA:
        from examgen.llm.ollama import OllamaConfig

        config = OllamaConfig(
            host=settings.ollama_host,
            model=settings.ollama_model,
            timeout=settings.ollama_timeout,
        )
        return LLMProviderFactory.create("ollama", config=config)

    elif provider_name == LLMProviderEnum.GEMINI:
        from examgen.llm.gemini import GeminiConfig

        if not settings.gemini_api_key:
            raise InvalidRequest("Gemini API key is required")

        config = GeminiConfig(api_key=settings.gemini_api_key, model=settings.gemini_model)
        return LLMProviderFactory.create("gemini", config=config)

    elif provider_name == LLMProviderEnum.OPENAI:
        from examgen.llm.openai import OpenAIConfig

        if not settings.openai_api_key:
            raise InvalidRequest("OpenAI API key is required")

        config = OpenAIConfig(api_key=settings.openai_api_key, model=settings.openai_model)
        return LLMProviderFactory.create("openai", config=config)

    elif provider_name == LLMProviderEnum.ANTHROPIC:
        from examgen.llm.anthropic import AnthropicConfig

        if not settings.anthropic_api_key:
            raise InvalidRequest("Anthropic API key is required")

        config = AnthropicConfig(
            api_key=settings.anthropic_api_key, model=settings.anthropic_model
        )
        return LLMProviderFactory.create("anthropic", config=config)

    else:
        raise ValueError(f"Unknown LLM provider: {provider_name}")
