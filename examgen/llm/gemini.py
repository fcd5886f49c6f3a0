"""Google Gemini completion provider implementation."""

import logging
from typing import Any

import google.generativeai as genai
from pydantic import BaseModel

from examgen.llm.base import LLMProvider, ResponseResult, SamplingOptions

logger = logging.getLogger(__name__)

GEMINI_MODELS = [
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-2.0-flash",
    "gemini-1.5-pro",
    "gemini-1.5-flash",
]


class GeminiConfig(BaseModel):
    """Configuration for Gemini provider."""

    api_key: str | None = None
    model: str = "gemini-2.5-flash"


class GeminiProvider(LLMProvider):
    """Google Gemini completion provider implementation."""

    name = "Gemini"

    def __init__(self, config: GeminiConfig | None = None, **kwargs: Any) -> None:
        """Initialize Gemini provider.

        Args:
            config: Gemini configuration
            **kwargs: Additional configuration options
        """
        self.config = config or GeminiConfig(**kwargs)
        if self.config.api_key:
            genai.configure(api_key=self.config.api_key)
        else:
            logger.warning("Gemini API key not configured")

    def has_credentials(self) -> bool:
        return bool(self.config.api_key)

    async def generate_completion(
        self,
        prompt: str,
        system_prompt: str | None = None,
        options: SamplingOptions | None = None,
    ) -> ResponseResult:
        """Generate a completion using the Gemini API.

        Args:
            prompt: User prompt
            system_prompt: Fixed system-level instructions
            options: Sampling options

        Returns:
            ResponseResult with the generated text
        """
        if not self.has_credentials():
            raise RuntimeError("Gemini client not initialized. Check GEMINI_API_KEY.")

        options = options or SamplingOptions()
        model = genai.GenerativeModel(self.config.model, system_instruction=system_prompt)

        try:
            response = await model.generate_content_async(
                prompt,
                generation_config=genai.types.GenerationConfig(
                    temperature=options.temperature,
                    max_output_tokens=options.max_output_tokens,
                    top_p=options.top_p,
                ),
            )

            return ResponseResult(
                content=response.text,
                model=self.config.model,
                token_count=response.usage_metadata.total_token_count
                if response.usage_metadata
                else None,
                finish_reason=response.candidates[0].finish_reason.name
                if response.candidates
                else None,
            )

        except Exception as e:
            logger.error(f"Gemini completion request failed: {e}")
            raise RuntimeError(f"Failed to generate completion: {e}")

    async def health_check(self) -> bool:
        """Check if Gemini service is accessible.

        Returns:
            True if healthy, False otherwise
        """
        if not self.has_credentials():
            return False

        try:
            genai.get_model(f"models/{self.config.model}")
            return True
        except Exception as e:
            logger.warning(f"Gemini health check failed: {e}")
            return False

    async def list_models(self) -> list[str]:
        """List Gemini models that support content generation."""
        if not self.has_credentials():
            return list(GEMINI_MODELS)

        try:
            return [
                m.name.removeprefix("models/")
                for m in genai.list_models()
                if "generateContent" in m.supported_generation_methods
            ]
        except Exception as e:
            logger.warning(f"Failed to list Gemini models: {e}")
            return list(GEMINI_MODELS)
