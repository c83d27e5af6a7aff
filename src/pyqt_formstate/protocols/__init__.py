"""
Protocol definitions and configuration.

ABC-based node contracts shared by forms and form collections, plus the
application-level configuration hook.
"""

from .form_node import FormNode
from .form_config import FormStateConfig, set_form_config, get_form_config

__all__ = [
    "FormNode",
    "FormStateConfig",
    "set_form_config",
    "get_form_config",
]
