"""CoursePath utilities."""

from .outline_loader import load_outline, resolve_outline_path, get_available_outlines
from .rows import parse_rows

__all__ = [
    "load_outline",
    "resolve_outline_path",
    "get_available_outlines",
    "parse_rows",
]
