"""Logging configuration for lyricseg."""

import logging
import sys


def setup_logging(level: str = "WARNING", verbose: bool = False) -> logging.Logger:
    """Set up the package logger for command-line use."""

    logger = logging.getLogger("lyricseg")
    logger.setLevel(getattr(logging, level.upper()))

    logger.handlers.clear()

    if verbose:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        formatter = logging.Formatter("%(levelname)s: %(message)s")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
