"""Configuration for the sampling harness.

Settings can be overridden via ``VARIATES_``-prefixed environment variables
or a .harness.env file next to this module.
"""

import os
import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class HarnessSettings(BaseSettings):
    """Configure how many variates the harness draws per distribution.

    Attributes:
        sample_count: Draws averaged for each case.
        seed: Root seed for the harness streams. None draws fresh entropy.

    Example:
        ```python
        settings = HarnessSettings(sample_count=10_000, seed=42)
        ```
    """

    model_config = SettingsConfigDict(
        env_file=os.path.join(os.path.dirname(__file__), ".harness.env"),
        env_prefix="VARIATES_",
        case_sensitive=False,
        validate_default=True,
    )

    sample_count: int = Field(
        default=100_000,
        ge=1,
        description="Number of variates averaged per distribution",
    )
    seed: int | None = Field(
        default=None,
        ge=0,
        description="Root seed (None = fresh entropy)",
    )

    @field_validator("sample_count")
    @classmethod
    def validate_sample_count(cls, v: int) -> int:
        """Warn when the sample count is too small for a stable mean.

        Args:
            v: Proposed sample count.

        Returns:
            Validated sample count.
        """
        if v < 1000:
            logger.warning(
                "Low harness sample count (%d) gives noisy mean estimates", v
            )
        return v


@lru_cache()
def get_harness_settings() -> HarnessSettings:
    """Get cached harness settings instance.

    Returns:
        Singleton instance of HarnessSettings.
    """
    return HarnessSettings()
