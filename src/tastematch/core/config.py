"""
Configuration management for tastematch.

Uses Pydantic settings for type-safe configuration with environment variable support.
All settings can be overridden via environment variables.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .types import (
    DEFAULT_COMPONENT_PRECISION,
    DEFAULT_SCORE_PRECISION,
    SUPPORTED_PRECISIONS,
    RankingStrategy,
    ScoringStrategy,
)


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables, e.g.
    DATABASE_URL, SQLITE_PATH, QUERY_TIMEOUT_MS.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Application Metadata
    # ==========================================================================
    app_name: str = "tastematch"
    app_version: str = "1.0.0"
    debug: bool = False

    # ==========================================================================
    # Database Configuration
    # ==========================================================================
    database_url: Optional[str] = Field(
        default=None,
        description="PostgreSQL connection string. When unset the SQLite store is used.",
    )
    sqlite_path: Path = Field(
        default=Path("tastematch.sqlite"),
        description="Location of the local SQLite database",
    )
    database_pool_size: int = Field(default=10, ge=1, le=50)
    database_pool_timeout: int = Field(default=30, ge=1, le=120)
    query_timeout_ms: int = Field(
        default=30000,
        ge=0,
        description="Upper bound for bulk reads in milliseconds (0 disables)",
    )

    @computed_field
    @property
    def use_postgres(self) -> bool:
        """Whether the PostgreSQL store is configured."""
        return bool(self.database_url)

    # ==========================================================================
    # Scoring Configuration
    # ==========================================================================
    component_precision: int = Field(
        default=DEFAULT_COMPONENT_PRECISION,
        description="Decimal places kept on vector components (0 = integer)",
    )
    score_precision: int = Field(
        default=DEFAULT_SCORE_PRECISION,
        description="Decimal places kept on scores (0 = whole percent)",
    )
    validate_components: bool = Field(
        default=True,
        description="Reject components outside [0, 5] at the boundary",
    )
    default_top_n: int = Field(default=10, ge=1, le=1000)
    default_ranking_strategy: RankingStrategy = RankingStrategy.in_memory
    default_scoring_strategy: ScoringStrategy = ScoringStrategy.weighted

    @field_validator("component_precision", "score_precision")
    @classmethod
    def _check_precision(cls, value: int) -> int:
        if value not in SUPPORTED_PRECISIONS:
            raise ValueError(f"precision must be one of {SUPPORTED_PRECISIONS}")
        return value

    # ==========================================================================
    # API Configuration
    # ==========================================================================
    api_prefix: str = "/api/v1"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
