# Area: Shared
"""
marrakech._config — Engine configuration
========================================

Configuration is layered: built-in defaults, then an optional JSON file,
then MARRAKECH_* environment variables (a .env file is honoured). The
merged result is validated into an EngineConfig.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ._engine.board import DEFAULT_BOARD_SIZE
from ._session.locks import DEFAULT_LOCK_TIMEOUT

logger = logging.getLogger("marrakech.config")

# Environment variable -> config key
ENV_MAPPINGS = {
    "MARRAKECH_BOARD_SIZE": "board_size",
    "MARRAKECH_LOCK_TIMEOUT": "lock_timeout_seconds",
    "MARRAKECH_SEED": "seed",
    "MARRAKECH_LOG_FILE": "log_file",
    "MARRAKECH_LOG_LEVEL": "log_level",
}

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class EngineConfig(BaseModel):
    """Validated engine settings."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    board_size: int = Field(DEFAULT_BOARD_SIZE, ge=3, le=26)
    lock_timeout_seconds: float = Field(DEFAULT_LOCK_TIMEOUT, gt=0)
    seed: Optional[int] = None
    log_file: str = "marrakech.log"
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level


def validate_config(config: Dict[str, Any]) -> EngineConfig:
    """
    Validate a raw config dict.

    Raises:
        ValueError: If any value is out of range or of the wrong type
    """
    try:
        return EngineConfig(**config)
    except ValidationError as e:
        raise ValueError(f"Invalid config: {e}") from e


def load_config(config_path: Optional[str] = None, env_file: Optional[str] = None) -> EngineConfig:
    """
    Load config from file and environment.

    Raises:
        ValueError: If the file is not a JSON object or a value is invalid
    """
    config: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config = json.load(f)
            if not isinstance(config, dict):
                raise ValueError(f"Config file {config_path} must hold a JSON object, got {type(config).__name__}")
        else:
            logger.warning(f"Config file {config_path} not found, using defaults")

    load_dotenv(env_file)
    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            config[config_key] = os.environ[env_key]

    return validate_config(config)
