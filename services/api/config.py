from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    env: Literal["dev", "test", "staging", "prod"] = Field(
        default="dev", description="Deployment environment label"
    )

    # Readiness checks: comma-separated list of checks to perform: credentials,storage
    ready_checks: str = Field(default="", description="Comma-separated readiness checks: credentials,storage")

    # Provider
    openai_api_key: str | None = Field(default=None, description="OpenAI API key (OPENAI_API_KEY)")
    openai_model: str = Field(default="dall-e-3", description="Image model passed to the provider")
    openai_base_url: str | None = None

    # Storage; None means <cwd>/images resolved per call
    output_dir: str | None = None

    # Metrics
    metrics_enabled: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        values: dict[str, object] = {
            "openai_api_key": os.getenv("OPENAI_API_KEY") or None,
            "openai_base_url": os.getenv("IG_OPENAI_BASE_URL") or None,
            "output_dir": os.getenv("IG_OUTPUT_DIR") or None,
            "ready_checks": os.getenv("IG_READY_CHECKS", ""),
            "metrics_enabled": os.getenv("IG_METRICS_ENABLED", "true").lower() in {"1", "true", "yes", "on"},
        }
        if os.getenv("IG_ENV"):
            values["env"] = os.getenv("IG_ENV")
        if os.getenv("IG_OPENAI_MODEL"):
            values["openai_model"] = os.getenv("IG_OPENAI_MODEL")
        return cls.model_validate(values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # .env is read once; real environment variables win over file values
    load_dotenv(override=False)
    return Settings.from_env()
