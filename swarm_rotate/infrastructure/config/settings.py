"""
Runtime configuration read from the environment (and a local .env file).

All variables share the SWARM_ROTATE_ prefix:

    SWARM_ROTATE_DOCKER_BIN    docker executable            (default: docker)
    SWARM_ROTATE_DOCKER_HOST   daemon to talk to            (default: docker's own)
    SWARM_ROTATE_TIMEOUT       seconds per docker call      (default: 120)
    SWARM_ROTATE_DETACH        don't wait for convergence   (default: false)
    SWARM_ROTATE_LOG_LEVEL     logging level name           (default: WARNING)
"""

import logging
import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "SWARM_ROTATE_"


class Settings(BaseModel):
    docker_bin: str = Field(default="docker", min_length=1)
    docker_host: Optional[str] = None
    timeout: float = Field(default=120.0, gt=0)
    detach: bool = False
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from *environ* (defaults to os.environ).

        Raises:
            pydantic.ValidationError (a ValueError): on malformed values.
        """
        environ = os.environ if environ is None else environ
        values = {
            name: environ[ENV_PREFIX + name.upper()]
            for name in cls.model_fields
            if ENV_PREFIX + name.upper() in environ
        }
        return cls(**values)


def load_settings() -> Settings:
    """Load .env (without overriding the real environment) and read Settings."""
    load_dotenv()
    return Settings.from_env()
