"""CLI utilities for mailticks."""

from .color import print_green, print_red, print_yellow
from .password import handle_smtp_password, prompt_password

__all__ = [
    "handle_smtp_password",
    "prompt_password",
    "print_green",
    "print_red",
    "print_yellow",
]
