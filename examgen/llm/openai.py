"""OpenAI completion provider implementation."""

import logging
from typing import Any

import openai
from pydantic import BaseModel

from examgen.llm.base import LLMProvider, ResponseResult, SamplingOptions

logger = logging.getLogger(__name__)


class OpenAIConfig(BaseModel):
    """Configuration for OpenAI provider."""

    api_key: str | None = None
    model: str = "gpt-4o-mini"
    timeout: int = 180
    max_retries: int = 0


class OpenAIProvider(LLMProvider):
    """OpenAI chat-completions provider implementation."""

    name = "OpenAI"

    def __init__(self, config: OpenAIConfig | None = None, **kwargs: Any) -> None:
        """Initialize OpenAI provider.

        Args:
            config: OpenAI configuration
            **kwargs: Additional configuration options
        """
        self.config = config or OpenAIConfig(**kwargs)
        self.client: openai.AsyncOpenAI | None = None
        if self.config.api_key:
            # Retries are handled by the question generator, not the SDK
            self.client = openai.AsyncOpenAI(
                api_key=self.config.api_key,
                timeout=self.config.timeout,
                max_retries=self.config.max_retries,
            )

    def has_credentials(self) -> bool:
        return self.client is not None

    async def generate_completion(
        self,
        prompt: str,
        system_prompt: str | None = None,
        options: SamplingOptions | None = None,
    ) -> ResponseResult:
        """Generate a completion using OpenAI's chat model.

        Args:
            prompt: User prompt
            system_prompt: Fixed system-level instructions
            options: Sampling options

        Returns:
            ResponseResult with the generated text
        """
        if self.client is None:
            raise RuntimeError("OpenAI client not initialized. Check OPENAI_API_KEY.")

        options = options or SamplingOptions()
        messages = []

        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})

        messages.append({"role": "user", "content": prompt})

        try:
            response = await self.client.chat.completions.create(
                model=self.config.model,
                messages=messages,
                max_tokens=options.max_output_tokens,
                temperature=options.temperature,
                top_p=options.top_p,
            )

            if not response.choices:
                raise RuntimeError("Invalid OpenAI response: no choices returned")
            choice = response.choices[0]

            return ResponseResult(
                content=choice.message.content or "",
                model=self.config.model,
                token_count=response.usage.total_tokens if response.usage else None,
                finish_reason=choice.finish_reason,
            )

        except openai.OpenAIError as e:
            logger.error(f"OpenAI completion request failed: {e}")
            raise RuntimeError(f"Failed to generate completion: {e}")
        except (AttributeError, TypeError, ValueError) as e:
            logger.error(f"OpenAI returned a malformed response: {e}")
            raise RuntimeError(f"Invalid OpenAI response: {e}")

    async def health_check(self) -> bool:
        """Check if OpenAI service is accessible.

        Returns:
            True if healthy, False otherwise
        """
        if self.client is None:
            return False

        try:
            await self.client.models.retrieve(self.config.model)
            return True
        except Exception as e:
            logger.warning(f"OpenAI health check failed: {e}")
            return False

    async def list_models(self) -> list[str]:
        """List models available to the configured API key."""
        if self.client is None:
            return []

        try:
            page = await self.client.models.list()
            return [model.id for model in page.data]
        except openai.OpenAIError as e:
            logger.warning(f"Failed to list OpenAI models: {e}")
            return []

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self.client is not None:
            await self.client.close()
