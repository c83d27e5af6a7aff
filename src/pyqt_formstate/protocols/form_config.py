"""Base configuration class for form state behavior.

Provides hooks for applications to customize how forms initialize,
reset and report changes.
"""

from typing import Optional
from dataclasses import dataclass


@dataclass
class FormStateConfig:
    """Base configuration for form state behavior.

    Applications can subclass this to provide custom configuration.

    Attributes:
        copy_literal_defaults: Deep-copy literal field defaults on every initialization
        clear_messages_on_reset: Blank validation messages when fields are reset to defaults
        detach_removed_members: Detach forms removed from a collection from the parent's children
        debug_notifications: Log every change notification emitted by the notifier
    """

    copy_literal_defaults: bool = True
    clear_messages_on_reset: bool = False
    detach_removed_members: bool = False
    debug_notifications: bool = False


# Global config instance (set by application)
_form_config: Optional[FormStateConfig] = None


def set_form_config(config: Optional[FormStateConfig]) -> None:
    """Set the global form state configuration.

    Args:
        config: FormStateConfig instance, or None to restore defaults
    """
    global _form_config
    _form_config = config


def get_form_config() -> FormStateConfig:
    """Get the current form state configuration.

    Returns:
        Current FormStateConfig or default if not set
    """
    if _form_config is None:
        return FormStateConfig()
    return _form_config
