"""Completion providers module."""

from examgen.llm.anthropic import AnthropicConfig, AnthropicProvider
from examgen.llm.base import LLMProvider, LLMProviderFactory, ResponseResult, SamplingOptions
from examgen.llm.factory import create_llm_provider
from examgen.llm.gemini import GeminiConfig, GeminiProvider
from examgen.llm.ollama import OllamaConfig, OllamaProvider
from examgen.llm.openai import OpenAIConfig, OpenAIProvider

# Register all providers
LLMProviderFactory.register("ollama", OllamaProvider)
LLMProviderFactory.register("gemini", GeminiProvider)
LLMProviderFactory.register("openai", OpenAIProvider)
LLMProviderFactory.register("anthropic", AnthropicProvider)

__all__ = [
    "AnthropicConfig",
    "AnthropicProvider",
    "GeminiConfig",
    "GeminiProvider",
    "LLMProvider",
    "LLMProviderFactory",
    "OllamaConfig",
    "OllamaProvider",
    "OpenAIConfig",
    "OpenAIProvider",
    "ResponseResult",
    "SamplingOptions",
    "create_llm_provider",
]
