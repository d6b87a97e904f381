"""File permission mode parsing."""

import re

from cocinero_core.errors import create_error

# "644", "0644", "0o644", "4755"
_MODE_PATTERN = re.compile(r"^(?:0o)?([0-7]{1,4})$")

MAX_MODE = 0o7777


def parse_mode(mode: str) -> int:
    """Parse an octal permission string.

    Args:
        mode: Mode as written in the recipe

    Returns:
        Permission bits as an int

    Raises:
        ProvisionError(INVALID_MODE) if mode is not an octal permission string
    """
    match = _MODE_PATTERN.match(mode.strip())
    if not match:
        raise create_error("INVALID_MODE", mode=mode)
    return int(match.group(1), 8)


def is_valid_mode(mode: str) -> bool:
    """Check a mode string without raising."""
    return bool(_MODE_PATTERN.match(mode.strip()))


def format_mode(mode: int) -> str:
    """Render permission bits as a four-digit octal string."""
    return f"{mode & MAX_MODE:04o}"
