"""
Logging bootstrap for applications embedding the PokeAPI data-access layer.

All modules log through named loggers under ``pokedex``; this module only
wires handlers and levels, so importing the library never configures logging
on its own.
"""

import logging
import sys
from typing import Optional

from config.settings import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None):
    """
    Configure root logging and the ``pokedex`` logger.

    Args:
        level: Level name (e.g. 'DEBUG'). Defaults to ``LOG_LEVEL``.
        log_file: Optional path of a UTF-8 log file written alongside stdout.

    Returns:
        The configured ``pokedex`` logger.
    """
    level_name = (level or LOG_LEVEL).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, handlers=handlers)

    # basicConfig is a no-op once configured, so always apply the level
    logging.getLogger().setLevel(numeric_level)
    logger = logging.getLogger("pokedex")
    logger.setLevel(numeric_level)
    return logger
