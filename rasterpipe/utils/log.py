"""rasterpipe.utils.log – colourised logger helper"""

from __future__ import annotations

import logging

import colorlog

from rasterpipe.utils import config

# Map level names to logging constants
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _get_level_from_config() -> int:
    """Gets the logging level from config, defaulting to INFO."""
    level_name = config.get_logging_level().upper()
    return LOG_LEVEL_MAP.get(level_name, logging.INFO)


_LEVEL = _get_level_from_config()

_handler: logging.Handler | None = None


def _build_handler() -> logging.Handler:
    handler = colorlog.StreamHandler()
    handler.setFormatter(
        colorlog.ColoredFormatter(
            fmt="%(log_color)s[%(levelname).1s] %(name)s: %(message)s",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "white",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bold",
            },
        )
    )
    return handler


def get_logger(name: str | None = None) -> logging.Logger:
    """Gets a logger instance sharing the package-wide colour handler."""
    global _handler

    logger = logging.getLogger(name)
    logger.setLevel(_LEVEL)

    if _handler is None:
        _handler = _build_handler()
        _handler.setLevel(_LEVEL)

    if _handler not in logger.handlers:
        logger.addHandler(_handler)

    return logger


def set_level(debug_mode: bool) -> None:
    """Set the global logging level based on debug mode."""
    global _LEVEL
    _LEVEL = logging.DEBUG if debug_mode else logging.INFO

    if _handler:
        _handler.setLevel(_LEVEL)

    for name in list(logging.Logger.manager.loggerDict):
        if name == "rasterpipe" or name.startswith("rasterpipe."):
            logging.getLogger(name).setLevel(_LEVEL)
