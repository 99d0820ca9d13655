import os
import sys
from typing import Optional

from loguru import logger


def config(level: Optional[str] = None):
    """
    Configure the global Loguru logger. Keeps this function lightweight so it
    can be imported across the codebase without side-effects.

    Logs go to stderr: stdout is reserved for the rendered changelog when the
    ``print`` target is used.
    """
    LOG_LEVEL = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    logger.remove()
    logger.add(
        sys.stderr,
        level=LOG_LEVEL,
        colorize=True,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )
