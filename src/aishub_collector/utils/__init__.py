"""Utility modules for the AISHub collector."""

from .formatting import format_number
from .logging import setup_logging

__all__ = [
    "format_number",
    "setup_logging",
]
