"""ANSI color codes for terminal output.

All colors use the 256-color palette.

Usage:
    from cocinero_core.logging.colors import GREEN, RED, RESET

    print(f"{GREEN}Success!{RESET}")
"""

RESET = "\033[0m"

# Status
GREEN = "\033[38;5;82m"  # Success
RED = "\033[38;5;196m"  # Failure
YELLOW = "\033[38;5;226m"  # Warnings

# Information
LIGHT_BLUE = "\033[38;5;153m"  # Context/metrics
CYAN = "\033[38;5;51m"  # Info
MAGENTA = "\033[38;5;201m"  # Run-level events
GREY = "\033[38;5;245m"  # Captured process output

SUCCESS = GREEN
FAILURE = RED
WARNING = YELLOW
INFO = LIGHT_BLUE

__all__ = [
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
    "GREY",
    "SUCCESS",
    "FAILURE",
    "WARNING",
    "INFO",
]
