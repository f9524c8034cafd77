"""
Engine configuration.

Values are read from the environment (prefix ``ANTHRO_``) or a ``.env`` file.
"""

import os
from functools import lru_cache

from pydantic_settings import BaseSettings


class AnthroSettings(BaseSettings):
    """Anthropometry engine settings."""

    staleness_threshold_days: int = 30

    # AI narrative analysis
    ai_enabled: bool = False
    ai_model: str = "openai/gpt-4o"
    ai_memory_model: str = "openai/gpt-4o-mini"
    ai_memory_db_path: str = os.path.join(
        os.path.dirname(__file__), "..", "data", "agent_memory.db"
    )

    class Config:
        env_prefix = "ANTHRO_"
        env_file = ".env"


@lru_cache
def get_settings() -> AnthroSettings:
    """Get cached settings instance."""
    return AnthroSettings()
