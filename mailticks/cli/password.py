"""Password handling utilities for CLI."""

import getpass
import logging

from mailticks.config import Config

logger = logging.getLogger("mailticks")


def prompt_password(
    prompt: str, ask: bool, provided: str | None
) -> str | None:
    """
    Prompt for password if asked, otherwise return provided value.

    Args:
        prompt: The prompt message to display.
        ask: Whether to prompt for password.
        provided: The pre-provided password value.

    Returns:
        The password string or None.
    """
    if ask:
        return getpass.getpass(prompt=prompt)
    return provided


def handle_smtp_password(
    config: Config, ask_smtp_pass: bool, smtp_pass: str | None
) -> None:
    """
    Resolve the SMTP password and store it in the config.

    Args:
        config: The configuration object containing the SMTP settings.
        ask_smtp_pass: Whether to prompt for the password.
        smtp_pass: The password given on the command line (may be None).
    """
    smtp_pass = prompt_password(
        "Enter SMTP password: ", ask_smtp_pass, smtp_pass
    )
    config.smtp.password = smtp_pass or config.smtp.password
    if config.smtp.auth and not config.smtp.password:
        logger.warning(
            "Empty SMTP password - authentication will likely fail"
        )
