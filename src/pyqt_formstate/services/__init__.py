"""
Service layer for form state.

Cross-cutting concerns shared by forms and form collections.
"""

from .change_notifier import ChangeNotifier, FormSignals

# Also export as module
from . import change_notifier

__all__ = [
    "ChangeNotifier",
    "FormSignals",
    "change_notifier",
]
