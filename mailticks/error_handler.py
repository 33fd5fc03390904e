"""Error handling utilities for the mailticks command line.

This module provides centralized error handling functions to ensure
consistent, user-friendly error messages and exit codes.
"""

import sys

from mailticks.exceptions import (
    ConfigurationError,
    MailticksError,
    ValidationError,
)
from mailticks.log import logger

# Exit code for bad configuration or command line input, as click uses
USAGE_EXIT_CODE = 2


def exit_code_for(error: Exception) -> int:
    if isinstance(error, (ConfigurationError, ValidationError)):
        return USAGE_EXIT_CODE
    return 1


def handle_error(error: Exception, exit_on_error: bool = False) -> None:
    """Handle an error by logging it and optionally exiting.

    Args:
        error: The exception that was raised
        exit_on_error: If True, exit the program after logging the error.
            Configuration and input errors exit with code 2, anything
            else with 1.
    """
    if isinstance(error, MailticksError):
        logger.error(f"{type(error).__name__}: {error}")
    else:
        logger.error(f"Unexpected error: {error}")
        logger.debug("Stack trace:", exc_info=True)

    if exit_on_error:
        sys.exit(exit_code_for(error))
