# canvasflow/config.py
"""
Runtime settings, read from CANVASFLOW_* environment variables.

get_settings() is cached so the environment is parsed once per process.
"""
import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import ErrorPolicy

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CANVASFLOW_", extra="ignore")

    log_level: str = "INFO"
    # policy for workflows created without an explicit one
    error_policy: ErrorPolicy = ErrorPolicy.STOP_ALL
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str = None) -> None:
    level = (level or get_settings().log_level).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
