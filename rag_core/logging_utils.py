"""
Logging helpers for the RAG core.

Library modules log through ``logging.getLogger(__name__)`` and never attach
handlers themselves. Applications call ``configure_logging()`` once to get
coloured console output for everything under the ``rag_core`` logger.
"""

import logging
import os
from typing import Optional, Union

import colorlog

BASE_LOGGER_NAME = "rag_core"


def configure_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Attach a coloured stream handler to the ``rag_core`` logger.

    Safe to call more than once; the handler is only added the first time.

    Args:
        level: Logging level; defaults to the RAG_LOG_LEVEL env var, then INFO

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(BASE_LOGGER_NAME)

    if level is None:
        level = os.getenv("RAG_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(colorlog.ColoredFormatter(
            fmt=(
                "%(log_color)s%(asctime)s [%(levelname)s] "
                "%(name)s:%(lineno)d:%(reset)s %(message)s"
            ),
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        ))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
