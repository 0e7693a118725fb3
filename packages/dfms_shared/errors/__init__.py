"""Public shared error API for DFMS clients."""

from . import codes, messages
from .types import ErrorCategory, categorize

__all__ = [
    "ErrorCategory",
    "categorize",
    "codes",
    "messages",
]
