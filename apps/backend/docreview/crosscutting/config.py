"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults that match current behavior

Collaborators:
  - api/main.py: reads settings for CORS and startup validation
  - container.py: reads settings for provider selection and reconcile options
  - schemas/review.py: reads settings for request validation limits

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic — pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache for performance
  - Trim/coalesce thresholds are empirical; kept configurable
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROVIDERS = {"openrouter", "google", "fake"}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_env: Application environment (development/production)
        log_level: Root log level (default: INFO)
        log_json: Emit JSON logs (default: True)
        allowed_origins: Comma-separated CORS origins
        max_body_bytes: Max request body size (default: 2MB)
        llm_provider: openrouter|google|fake (default: openrouter)
        fake_llm: Force the deterministic fake provider (tests/CI)
        openrouter_api_key: OpenRouter API key
        openrouter_base_url: OpenAI-compatible endpoint base URL
        google_api_key: Google GenAI API key
        default_model: Model used when the request omits one
        thinking_models: Comma-separated models that reason before answering
        chunk_timeout_seconds: Per-chunk deadline for regular models (default: 55)
        thinking_chunk_timeout_seconds: Per-chunk deadline for thinking models (default: 100)
        llm_temperature: Sampling temperature (default: 0.3)
        llm_max_output_tokens: Output token cap (default: 16384)
        max_document_chars: Maximum document length (default: 30_000)
        default_chunk_size: Chunk size when the request omits one (0 = no chunking)
        max_chunk_concurrency: Concurrent provider calls per review (default: 8)
        trim_*: Suggestion trimmer thresholds
        coalesce_max_span: Max merged span length for overlapping suggestions (default: 80)
        retry_*: Retry policy for transient provider failures
        prompt_version: Review system-prompt template version (default: v1)
    """

    # Environment
    app_env: str = "development"
    log_level: str = "INFO"
    log_json: bool = True

    # CORS / hardening
    allowed_origins: str = "http://localhost:3000"
    max_body_bytes: int = 2 * 1024 * 1024  # 2MB

    # Completion provider
    llm_provider: str = "openrouter"
    fake_llm: bool = False
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    google_api_key: str = ""
    default_model: str = "anthropic/claude-sonnet-4"
    thinking_models: str = "moonshotai/kimi-k2.5,deepseek/deepseek-r1,openai/o4-mini"
    chunk_timeout_seconds: float = 55.0
    thinking_chunk_timeout_seconds: float = 100.0
    llm_temperature: float = 0.3
    llm_max_output_tokens: int = 16384

    # Review limits
    max_document_chars: int = 30_000
    default_chunk_size: int = 0
    max_chunk_concurrency: int = 8

    # Reconciliation thresholds
    trim_min_source_chars: int = 60
    trim_max_diff_chars: int = 40
    trim_expand_cap: int = 20
    trim_min_chars: int = 5
    trim_max_chars: int = 60
    trim_min_shrink_ratio: float = 0.8
    coalesce_max_span: int = 80

    # Retry/Resilience
    retry_max_attempts: int = 3
    retry_base_delay_seconds: float = 1.0
    retry_max_delay_seconds: float = 30.0

    # Prompts
    prompt_version: str = "v1"

    @field_validator("llm_provider")
    @classmethod
    def llm_provider_valid(cls, v: str) -> str:
        provider = (v or "openrouter").strip().lower()
        if provider not in _PROVIDERS:
            raise ValueError("llm_provider must be openrouter, google, or fake")
        return provider

    @field_validator(
        "max_document_chars",
        "max_chunk_concurrency",
        "llm_max_output_tokens",
        "coalesce_max_span",
        "trim_max_chars",
    )
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("value must be greater than 0")
        return v

    @field_validator("chunk_timeout_seconds", "thinking_chunk_timeout_seconds")
    @classmethod
    def timeout_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be greater than 0")
        return v

    @field_validator("trim_min_shrink_ratio")
    @classmethod
    def shrink_ratio_valid(cls, v: float) -> float:
        if v <= 0 or v > 1:
            raise ValueError("trim_min_shrink_ratio must be in (0, 1]")
        return v

    @model_validator(mode="after")
    def validate_trim_bounds(self):
        if self.trim_min_chars > self.trim_max_chars:
            raise ValueError(
                f"trim_min_chars ({self.trim_min_chars}) must not exceed "
                f"trim_max_chars ({self.trim_max_chars})"
            )
        return self

    @model_validator(mode="after")
    def validate_ai_requirements(self):
        if not self.is_production() or self.effective_provider() == "fake":
            return self
        if self.effective_provider() == "openrouter" and not self.openrouter_api_key:
            raise ValueError("OPENROUTER_API_KEY is required in production")
        if self.effective_provider() == "google" and not self.google_api_key:
            raise ValueError("GOOGLE_API_KEY is required in production")
        return self

    def effective_provider(self) -> str:
        return "fake" if self.fake_llm else self.llm_provider

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def get_thinking_models(self) -> frozenset[str]:
        return frozenset(
            model.strip() for model in self.thinking_models.split(",") if model.strip()
        )

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()
