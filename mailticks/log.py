"""Logging configuration for the mailticks package.

Diagnostics go to the ``mailticks`` logger with colored level names on
stderr. Telemetry events written by ``LoggingEventLogger`` go to the
``mailticks.events`` child logger, which gets its own plain handler on
stdout so that every event stays one parseable JSON line.
"""

import logging
import sys

from colorama import Fore, Style, init

from mailticks.config import Config

# Initialize colorama for cross-platform colored output
init(autoreset=True)

logger = logging.getLogger("mailticks")
events_logger = logging.getLogger("mailticks.events")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ColoredFormatter(logging.Formatter):
    """Formatter coloring the level name of diagnostic records."""

    COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.BLUE,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def format(self, record):
        color = self.COLORS.get(record.levelno)
        if not color:
            return super().format(record)

        levelname = record.levelname
        record.levelname = f"{color}{levelname}{Style.RESET_ALL}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def init_logger(config: Config):
    """Set up the diagnostic and event loggers from the config."""
    log_level = config.log_level
    logger.setLevel(log_level)

    # Clear any existing handlers to avoid duplicates
    logger.handlers.clear()

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(ColoredFormatter(LOG_FORMAT))
    logger.addHandler(stream_handler)
    logger.propagate = False

    # Events are recorded at INFO whatever the diagnostic level is
    events_logger.setLevel(logging.INFO)
    events_logger.handlers.clear()
    event_handler = logging.StreamHandler(sys.stdout)
    event_handler.setFormatter(logging.Formatter("%(message)s"))
    events_logger.addHandler(event_handler)
    events_logger.propagate = False
