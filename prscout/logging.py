"""Logging setup for the prscout CLI.

The configured level applies to the ``prscout`` logger tree only. The root
handler stays at WARNING or above, so ``LOGGING_LEVEL=DEBUG`` shows the
adapter's request URLs and page counts without urllib3 connection chatter.

Configure via config.yaml (logging.level, logging.format), env
(LOGGING_LEVEL, LOGGING_FORMAT) or ``prscout --verbose``.
"""

import logging

from prscout.config import LoggingConfig

PACKAGE_LOGGER = "prscout"
LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR")
DEFAULT_FORMAT = "%(levelname)s %(name)s: %(message)s"


def level_from_name(name: str) -> int:
    """Case-insensitive level name; anything unknown is INFO."""
    normalized = name.upper().strip()
    if normalized not in LEVEL_NAMES:
        return logging.INFO
    return logging.getLevelName(normalized)


class PrscoutLogging:
    """Applies LoggingConfig to the prscout loggers."""

    def __init__(self, config: LoggingConfig, verbose: bool = False) -> None:
        self.level = logging.DEBUG if verbose else level_from_name(config.level)
        self._format = config.format or DEFAULT_FORMAT

    def setup(self) -> logging.Logger:
        """Install one stderr handler on root and return the package logger."""
        logging.basicConfig(
            level=max(self.level, logging.WARNING),
            format=self._format,
            force=True,
        )
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.setLevel(self.level)
        return package_logger
