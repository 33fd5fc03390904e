"""Color printing utilities for CLI output."""


def print_green(text: str) -> None:
    """Print text in green color using ANSI escape codes."""
    print(f"\033[92m{text}\033[0m")


def print_yellow(text: str) -> None:
    """Print text in yellow color using ANSI escape codes."""
    print(f"\033[93m{text}\033[0m")


def print_red(text: str) -> None:
    """Print text in red color using ANSI escape codes."""
    print(f"\033[91m{text}\033[0m")
