"""Configuration management using pydantic-settings."""

from enum import Enum

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMProvider(str, Enum):
    """Supported completion backends."""

    OLLAMA = "ollama"
    GEMINI = "gemini"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


class Environment(str, Enum):
    """Application environments."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class QuotaAllocation(str, Enum):
    """How the requested question counts are spread over content chunks."""

    EVEN = "even"
    PROPORTIONAL = "proportional"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # LLM Provider Configuration
    llm_provider: LLMProvider = Field(
        default=LLMProvider.OLLAMA,
        description="Completion backend used for question generation",
    )

    # Ollama Configuration
    ollama_host: str = Field(
        default="http://localhost:11434",
        description="Ollama API host URL",
    )
    ollama_model: str = Field(
        default="gemma3:4b",
        description="Ollama model to use",
    )
    ollama_timeout: float = Field(
        default=180.0,
        description="Seconds to wait for a single Ollama generation",
    )

    # Google Gemini Configuration
    gemini_api_key: str | None = Field(
        default=None,
        description="Google Gemini API key",
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash",
        description="Google Gemini model to use",
    )

    # OpenAI Configuration
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="OpenAI chat model to use",
    )

    # Anthropic Configuration
    anthropic_api_key: str | None = Field(
        default=None,
        description="Anthropic API key",
    )
    anthropic_model: str = Field(
        default="claude-3-5-haiku-20241022",
        description="Anthropic model to use",
    )

    # Sampling Configuration
    temperature: float = Field(default=0.7, description="Sampling temperature for first attempts")
    retry_temperature: float = Field(
        default=0.5,
        description="Lower sampling temperature used from the second attempt onward",
    )
    max_output_tokens: int = Field(default=8192, description="Maximum tokens per completion")
    top_p: float = Field(default=0.9, description="Nucleus sampling cutoff")

    # Generation Configuration
    max_tokens_per_chunk: int = Field(
        default=8000,
        description="Token budget of a content chunk sent to the backend",
    )
    min_tokens_per_chunk: int = Field(
        default=500,
        description="Trailing chunks smaller than this are folded into the previous one",
    )
    max_attempts: int = Field(default=3, description="Backend calls per chunk, retries included")
    retry_backoff_seconds: float = Field(
        default=3.0,
        description="Base delay between attempts; attempt k waits k times this value",
    )
    quota_allocation: QuotaAllocation = Field(
        default=QuotaAllocation.EVEN,
        description="Strategy for spreading question counts across chunks",
    )

    # Application Configuration
    server_host: str = Field(default="0.0.0.0", description="HTTP bind address")
    server_port: int = Field(default=3000, description="HTTP port")
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )

    @model_validator(mode="after")
    def _check_chunk_budgets(self) -> "Settings":
        if self.max_tokens_per_chunk <= self.min_tokens_per_chunk:
            raise ValueError("MAX_TOKENS_PER_CHUNK must be greater than MIN_TOKENS_PER_CHUNK")
        return self

    def validate_provider_config(self) -> None:
        """Validate that required API keys are set for the selected provider."""
        if self.llm_provider == LLMProvider.GEMINI and not self.gemini_api_key:
            raise ValueError("Gemini API key is required when using Gemini provider")
        elif self.llm_provider == LLMProvider.OPENAI and not self.openai_api_key:
            raise ValueError("OpenAI API key is required when using OpenAI provider")
        elif self.llm_provider == LLMProvider.ANTHROPIC and not self.anthropic_api_key:
            raise ValueError("Anthropic API key is required when using Anthropic provider")


# Lazily created on first access
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the settings instance, loading it on first call."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
