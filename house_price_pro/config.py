"""
Configuration for the HousePricePro API.

Settings are read from environment variables prefixed with ``API_``
(e.g. ``API_ENGINE_TIMEOUT_SECONDS=10``). List values such as
``API_ENGINE_COMMAND`` are given as JSON arrays.

The estimation engine gets its own explicit ``EngineConfig`` built from the
settings, so the boundary never looks anything up from the environment.
"""

import sys
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineConfig(BaseModel):
    """How to launch and supervise the out-of-process estimation engine."""

    model_config = ConfigDict(frozen=True)

    command: tuple[str, ...] = Field(..., min_length=1)
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_concurrency: int = Field(default=4, ge=1)
    metrics_flag: str = "--metrics"
    env: Optional[dict[str, str]] = None


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_prefix="API_", protected_namespaces=())

    app_name: str = "HousePricePro"
    app_version: str = "1.0.0"
    api_prefix: str = "/api"
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # Estimation engine
    engine_command: list[str] = Field(
        default_factory=lambda: [sys.executable, "-m", "house_price_pro.engine"]
    )
    model_dir: str = "model"
    engine_timeout_seconds: float = Field(default=30.0, gt=0)
    engine_max_concurrency: int = Field(default=4, ge=1)
    metrics_flag: str = "--metrics"

    # Validation
    reject_unknown_fields: bool = False

    def engine_config(self) -> EngineConfig:
        """Build the engine configuration handed to the estimator boundary."""
        return EngineConfig(
            command=(*self.engine_command, "--model-dir", self.model_dir),
            timeout_seconds=self.engine_timeout_seconds,
            max_concurrency=self.engine_max_concurrency,
            metrics_flag=self.metrics_flag,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
