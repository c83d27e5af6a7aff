"""
Core utilities.

Small building blocks with no form-specific logic.
"""

from .completed import Completed

__all__ = [
    "Completed",
]
