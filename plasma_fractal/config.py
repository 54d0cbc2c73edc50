"""Configuration management."""

import os
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings

# Fill in values from a local .env without overriding the real environment
BASE_DIR = Path(__file__).resolve().parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    for key, value in file_env.items():
        if key not in os.environ and value is not None:
            os.environ[key] = value


class Settings(BaseSettings):
    """Application settings pulled from ``PLASMA_*`` environment variables."""

    # Generation defaults
    default_roughness: float = Field(default=0.28, description="Default roughness factor")
    default_intensity: float = Field(
        default=255.0, gt=0, description="Default maximum perturbation magnitude"
    )
    default_size: int = Field(default=256, ge=1, description="Default grid size (grid is size+1 square)")
    max_size: int = Field(default=2048, ge=1, description="Largest grid size accepted")
    seed: Optional[str] = Field(default=None, description="Seed for reproducible generation")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    class Config:
        env_prefix = "PLASMA_"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
