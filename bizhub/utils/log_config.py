"""
Logging setup

Applies LOG_LEVEL from settings to the root logger.
"""

import logging
from typing import Optional

from bizhub.utils.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for the process"""
    level_name = (level or settings.LOG_LEVEL).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    # basicConfig is a no-op once handlers exist
    logging.getLogger().setLevel(numeric_level)
    logging.getLogger(__name__).debug(f"Logging configured at {level_name}")
