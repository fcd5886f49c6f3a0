"""Ollama completion provider implementation."""

import logging
from typing import Any

import httpx
from pydantic import BaseModel

from examgen.llm.base import LLMProvider, ResponseResult, SamplingOptions

logger = logging.getLogger(__name__)


class OllamaConfig(BaseModel):
    """Configuration for Ollama provider."""

    host: str = "http://localhost:11434"
    model: str = "gemma3:4b"
    timeout: float = 180.0
    json_mode: bool = True


class OllamaProvider(LLMProvider):
    """Ollama completion provider using the local HTTP API."""

    name = "Ollama"

    def __init__(self, config: OllamaConfig | None = None, **kwargs: Any) -> None:
        """Initialize Ollama provider.

        Args:
            config: Ollama configuration
            **kwargs: Additional configuration options
        """
        self.config = config or OllamaConfig(**kwargs)
        self.client = httpx.AsyncClient(
            base_url=self.config.host,
            timeout=self.config.timeout,
        )

    async def generate_completion(
        self,
        prompt: str,
        system_prompt: str | None = None,
        options: SamplingOptions | None = None,
    ) -> ResponseResult:
        """Generate a completion with Ollama's /api/generate endpoint.

        Args:
            prompt: User prompt
            system_prompt: Fixed system-level instructions
            options: Sampling options

        Returns:
            ResponseResult with the generated text
        """
        options = options or SamplingOptions()
        payload: dict[str, Any] = {
            "model": self.config.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": options.temperature,
                "num_predict": options.max_output_tokens,
                "top_p": options.top_p,
            },
        }
        if system_prompt:
            payload["system"] = system_prompt
        if self.config.json_mode:
            payload["format"] = "json"

        try:
            logger.debug(f"Sending request to Ollama with model: {self.config.model}")
            logger.debug(f"Prompt length: {len(prompt)} characters")

            response = await self.client.post("/api/generate", json=payload)
            response.raise_for_status()
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")

            return ResponseResult(
                content=data.get("response", ""),
                model=self.config.model,
                token_count=data.get("eval_count"),
                finish_reason=data.get("done_reason"),
            )

        except httpx.TimeoutException as e:
            logger.error(f"Ollama request timed out after {self.config.timeout}s: {e}")
            raise RuntimeError(f"Ollama request timed out: {e}")
        except httpx.HTTPStatusError as e:
            logger.error(f"Ollama HTTP error {e.response.status_code}: {e.response.text}")
            raise RuntimeError(f"Ollama API error: {e}")
        except httpx.RequestError as e:
            logger.error(f"Ollama request failed: {e} (host: {self.config.host})")
            raise RuntimeError(f"Failed to generate completion: {e}")
        except ValueError as e:
            logger.error(f"Ollama returned a malformed body: {e}")
            raise RuntimeError(f"Invalid Ollama response: {e}")

    async def health_check(self) -> bool:
        """Check if Ollama service is healthy.

        Returns:
            True if healthy, False otherwise
        """
        try:
            response = await self.client.get("/api/tags")
            return response.status_code == 200
        except Exception as e:
            logger.warning(f"Ollama health check failed: {e}")
            return False

    async def list_models(self) -> list[str]:
        """List models pulled into the local Ollama instance."""
        try:
            response = await self.client.get("/api/tags")
            if response.status_code == 200:
                return [m["name"] for m in response.json().get("models", [])]
        except Exception as e:
            logger.warning(f"Failed to list Ollama models: {e}")

        return []

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
