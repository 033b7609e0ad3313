"""
Recognizer Settings

Settings are read from a YAML file (config/recognizer.yaml by default):

    recognizer:
      trace: false
      log_level: INFO

A missing file is not an error; defaults apply.
"""

from pathlib import Path
from typing import Optional, Union

import yaml
from loguru import logger
from pydantic import BaseModel, field_validator

DEFAULT_CONFIG_PATH = Path("config/recognizer.yaml")

LOG_LEVELS = ('TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL')


class RecognizerSettings(BaseModel):
    """
    Settings of the recognition process.

    Attributes:
        trace: Print recognized components to stdout after recognition
        log_level: Console log level used by the command line interface
    """
    trace: bool = False
    log_level: str = 'INFO'

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Accept loguru level names in any case."""
        level = str(v).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f'log_level must be one of {", ".join(LOG_LEVELS)}')
        return level


def load_settings(config_path: Optional[Union[str, Path]] = None) -> RecognizerSettings:
    """
    Load recognizer settings from a YAML file.

    Args:
        config_path: Path to the YAML file, defaults to config/recognizer.yaml

    Returns:
        Validated settings

    Raises:
        pydantic.ValidationError: When the file holds invalid values
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    if not path.exists():
        logger.warning(f"Config file not found: {path}, using defaults")
        return RecognizerSettings()

    logger.info(f"Loading configuration from: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f) or {}

    return RecognizerSettings(**(config.get('recognizer') or {}))
