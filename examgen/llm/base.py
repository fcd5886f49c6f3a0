"""Base completion provider interface and factory pattern."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class SamplingOptions(BaseModel):
    """Sampling parameters passed with every completion request."""

    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=8192, gt=0)
    top_p: float = Field(default=0.9, gt=0.0, le=1.0)


class ResponseResult(BaseModel):
    """Result from a completion request."""

    content: str
    model: str
    token_count: int | None = None
    finish_reason: str | None = None


class LLMProvider(ABC):
    """Abstract base class for completion backends.

    Implementations take a fixed system instruction and a prompt and return
    free-form text. Transport and API failures are raised as ``RuntimeError``.
    """

    name: str = "provider"

    @abstractmethod
    async def generate_completion(
        self,
        prompt: str,
        system_prompt: str | None = None,
        options: SamplingOptions | None = None,
    ) -> ResponseResult:
        """Generate a completion for the prompt.

        Args:
            prompt: User prompt
            system_prompt: Fixed system-level instructions
            options: Sampling options, provider defaults when omitted

        Returns:
            ResponseResult with the raw generated text
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the provider is healthy and accessible.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def list_models(self) -> list[str]:
        """List models the backend can serve.

        Returns:
            Model names, empty or a default list when the backend cannot be queried
        """
        pass

    def has_credentials(self) -> bool:
        """Whether the credentials the backend needs are configured."""
        return True

    def switch_model(self, model: str) -> None:
        """Use a different model for subsequent requests."""
        self.config.model = model

    async def aclose(self) -> None:
        """Release network resources held by the provider."""
        return None


class LLMProviderFactory:
    """Factory for creating completion providers."""

    _providers: dict[str, type[LLMProvider]] = {}

    @classmethod
    def register(cls, name: str, provider_class: type[LLMProvider]) -> None:
        """Register a provider class.

        Args:
            name: Provider name (e.g., "ollama", "gemini")
            provider_class: Provider class to register
        """
        cls._providers[name] = provider_class

    @classmethod
    def create(cls, name: str, **kwargs: Any) -> LLMProvider:
        """Create a provider instance.

        Args:
            name: Provider name
            **kwargs: Provider-specific configuration

        Returns:
            LLMProvider instance

        Raises:
            ValueError: If provider name is not registered
        """
        if name not in cls._providers:
            available = ", ".join(cls._providers.keys())
            raise ValueError(f"Unknown provider '{name}'. Available: {available}")

        return cls._providers[name](**kwargs)

    @classmethod
    def list_providers(cls) -> list[str]:
        """List all registered provider names.

        Returns:
            List of provider names
        """
        return list(cls._providers.keys())
