"""Template parsing utilities."""

import re

# Regex to find {{ }} placeholders; the name is everything between the braces
PLACEHOLDER_PATTERN = re.compile(r"\{\{(.*?)\}\}")


def extract_placeholders(text: str) -> list[str]:
    """Extract all placeholder names from text, in order of appearance.

    Args:
        text: Text to search

    Returns:
        List of names (without {{ }} and surrounding whitespace)
    """
    return [match.group(1).strip() for match in PLACEHOLDER_PATTERN.finditer(text)]


def has_placeholders(text: str) -> bool:
    """Check if text contains any {{ }} placeholder."""
    return bool(PLACEHOLDER_PATTERN.search(text))


def missing_variables(text: str, variables: dict[str, str]) -> list[str]:
    """List placeholder names in text that variables does not define.

    Args:
        text: Template text
        variables: Variable set to check against

    Returns:
        Missing names, deduplicated, in order of first appearance
    """
    missing: list[str] = []
    for name in extract_placeholders(text):
        if name not in variables and name not in missing:
            missing.append(name)
    return missing
