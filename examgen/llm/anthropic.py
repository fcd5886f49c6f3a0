"""Anthropic Claude completion provider implementation."""

import logging
from typing import Any

import anthropic
from pydantic import BaseModel

from examgen.llm.base import LLMProvider, ResponseResult, SamplingOptions

logger = logging.getLogger(__name__)


class AnthropicConfig(BaseModel):
    """Configuration for Anthropic provider."""

    api_key: str | None = None
    model: str = "claude-3-5-haiku-20241022"
    timeout: int = 180
    max_retries: int = 0


class AnthropicProvider(LLMProvider):
    """Anthropic Claude completion provider implementation."""

    name = "Anthropic"

    def __init__(self, config: AnthropicConfig | None = None, **kwargs: Any) -> None:
        """Initialize Anthropic provider.

        Args:
            config: Anthropic configuration
            **kwargs: Additional configuration options
        """
        self.config = config or AnthropicConfig(**kwargs)
        self.client: anthropic.AsyncAnthropic | None = None
        if self.config.api_key:
            self.client = anthropic.AsyncAnthropic(
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
        """Generate a completion using Anthropic's Claude model.

        top_p is not forwarded: the Messages API expects either temperature or
        top_p to be tuned, not both.

        Args:
            prompt: User prompt
            system_prompt: Fixed system-level instructions
            options: Sampling options

        Returns:
            ResponseResult with the generated text
        """
        if self.client is None:
            raise RuntimeError("Anthropic client not initialized. Check ANTHROPIC_API_KEY.")

        options = options or SamplingOptions()
        request: dict[str, Any] = {
            "model": self.config.model,
            "max_tokens": options.max_output_tokens,
            "temperature": min(options.temperature, 1.0),
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            request["system"] = system_prompt

        try:
            response = await self.client.messages.create(**request)

            # Anthropic returns content as a list of blocks
            content = ""
            for block in response.content:
                if block.type == "text":
                    content += block.text

            return ResponseResult(
                content=content,
                model=self.config.model,
                token_count=response.usage.output_tokens + response.usage.input_tokens,
                finish_reason=response.stop_reason,
            )

        except anthropic.AnthropicError as e:
            logger.error(f"Anthropic completion request failed: {e}")
            raise RuntimeError(f"Failed to generate completion: {e}")
        except (AttributeError, TypeError, ValueError) as e:
            logger.error(f"Anthropic returned a malformed response: {e}")
            raise RuntimeError(f"Invalid Anthropic response: {e}")

    async def health_check(self) -> bool:
        """Check if Anthropic service is accessible.

        Returns:
            True if healthy, False otherwise
        """
        if self.client is None:
            return False

        try:
            await self.client.models.retrieve(self.config.model)
            return True
        except Exception as e:
            logger.warning(f"Anthropic health check failed: {e}")
            return False

    async def list_models(self) -> list[str]:
        """List models available to the configured API key."""
        if self.client is None:
            return []

        try:
            page = await self.client.models.list()
            return [model.id for model in page.data]
        except anthropic.AnthropicError as e:
            logger.warning(f"Failed to list Anthropic models: {e}")
            return []

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self.client is not None:
            await self.client.close()
