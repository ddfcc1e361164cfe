# src/qamatch/settings.py
"""Behavioral settings for qamatch.

Settings are passed programmatically. The library itself never reads
environment variables; applications that want env-based config read them at
the application layer (see ``qamatch.config``) and pass values explicitly.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

# Embedding rate limit profiles
RATE_LIMIT_PROFILES: dict[str, dict[str, int]] = {
    "aggressive": {
        "max_concurrent_embeddings": 32,
        "num_retries": 5,
    },
    "conservative": {
        "max_concurrent_embeddings": 2,
        "num_retries": 5,
    },
}


class Settings(BaseModel):
    """Behavioral settings for the matching engine.

    Example:
        settings = Settings(default_k=3, backup_count=5)

        # Or use a rate limit profile for free API tiers
        settings = Settings.with_profile("conservative")
    """

    # Index builds: embedding calls in flight at once
    max_concurrent_embeddings: int = Field(default=8, ge=1)

    # Queries
    default_k: int = Field(default=5, ge=1)

    # Retry configuration, handed to the provider client (LiteLLM handles backoff)
    num_retries: int = Field(default=3, ge=0)

    # Persistence
    backup_count: int = Field(default=0, ge=0)
    json_indent: int | None = Field(default=2, ge=0)

    @classmethod
    def with_profile(
        cls,
        profile: Literal["aggressive", "conservative"],
        **overrides: Any,
    ) -> Settings:
        """Create Settings with a rate limit profile.

        Args:
            profile: The rate limit profile to use.
            **overrides: Additional settings to override profile defaults.

        Raises:
            ValueError: If the profile is unknown.
        """
        if profile not in RATE_LIMIT_PROFILES:
            raise ValueError(
                f"Unknown profile '{profile}'. "
                f"Available profiles: {list(RATE_LIMIT_PROFILES.keys())}"
            )

        profile_settings: dict[str, Any] = RATE_LIMIT_PROFILES[profile].copy()
        profile_settings.update(overrides)
        return cls(**profile_settings)
