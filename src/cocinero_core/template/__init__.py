"""Template rendering for templated recipe steps."""

from .engine import TemplateEngine, render
from .parser import extract_placeholders, has_placeholders, missing_variables

__all__ = [
    "TemplateEngine",
    "render",
    "extract_placeholders",
    "has_placeholders",
    "missing_variables",
]
