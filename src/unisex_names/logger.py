#!/usr/bin/env python
"""
loguru setup for the unisex names tools.

Library modules only ever call ``from loguru import logger``; the entry
points (the TUI launcher, scripts) decide where messages go by calling
``setup_logger`` once.
"""

import sys
from pathlib import Path

from loguru import logger

from .config import LOG_DIR

LOG_FILE_NAME = "unisex_names.log"

# Default level colors for console output
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def setup_logger(log_dir: Path = LOG_DIR, console: bool = True, level: str = "INFO") -> Path:
    """
    Configure loguru with a DEBUG file sink and an optional console sink.

    Args:
        log_dir: Directory that receives ``unisex_names.log``
        console: Add a colorized stdout sink. Must be False while a Textual
            app owns the terminal.
        level: Minimum level for the console sink

    Returns:
        Path to the log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / LOG_FILE_NAME

    # Remove default logger
    logger.remove()

    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(
        log_file, format="{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {name}:{line} | {message}", level="DEBUG"
    )

    if console:
        logger.add(
            sys.stdout,
            format="{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>",
            level=level,
            colorize=True,
        )

    logger.debug(f"Logging to {log_file}")
    return log_file
