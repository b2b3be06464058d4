"""Logging for the ss_tools package.

Modules obtain their logger through get_logger(__name__). Configuration is
confined to the "ss_tools" logger; the root logger and any handlers the
host application installed are never touched.
"""
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "ss_tools"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def _settings_level() -> str:
    from pydantic import ValidationError

    from ss_tools.utils.config import load_settings

    try:
        return load_settings().log_level
    except ValidationError:
        return "INFO"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Set the level of the package logger and give it a console handler.

    The handler is only attached when neither the package logger nor the
    root logger has one, so records are never emitted twice.

    Args:
        level: DEBUG/INFO/WARNING/ERROR. Defaults to Settings.log_level.

    Returns:
        The package logger.
    """
    global _configured
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _configured and level is None:
        return package_logger

    package_logger.setLevel(getattr(logging, (level or _settings_level()).upper(), logging.INFO))

    if not package_logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        package_logger.addHandler(handler)

    _configured = True
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Named logger below the package logger, configured on first use."""
    setup_logging()
    return logging.getLogger(name)
