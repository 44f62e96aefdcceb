from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "Trustgate API"
    app_version: str = "0.1.0"
    debug: bool = False

    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_methods: list[str] = ["GET", "POST", "PUT", "OPTIONS"]
    cors_allow_headers: list[str] = ["Content-Type", "X-Request-Id"]

    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Rephrase/block policy
    rephrase_max_violations: int = Field(
        default=2,
        description="More pattern violations than this forces a block instead of a rephrase.",
    )
    rephrase_max_grounding_issues: int = Field(
        default=2,
        description="More grounding issues than this forces a block instead of a rephrase.",
    )
    rephrase_min_length: int = Field(
        default=20,
        description="Rephrased text shorter than this is replaced by the fallback message.",
    )

    # Local model gating
    local_model_high_confidence: float = 0.8
    local_model_low_confidence: float = 0.4

    # Cache relevance scores
    relevance_generic_confidence: float = 0.3  # nothing matched, snapshot has data
    relevance_no_data_confidence: float = 0.1  # keyword hit, sections empty
    relevance_one_section_confidence: float = 0.7
    relevance_two_section_confidence: float = 0.85
    relevance_three_section_confidence: float = 0.95

    # Local model context assembly
    max_query_length: int = 2000
    context_value_max_length: int = 500
    context_timeline_limit: int = 10

    # Connectivity reported at startup, before the first status push
    authoritative_reachable: bool = False
    local_model_state: str = "unloaded"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_confidence_tiers(self) -> "Settings":
        if self.local_model_low_confidence > self.local_model_high_confidence:
            raise ValueError(
                "LOCAL_MODEL_LOW_CONFIDENCE must not exceed LOCAL_MODEL_HIGH_CONFIDENCE."
            )
        return self


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
