"""Form state exceptions."""


class FormStateError(Exception):
    """Base class for errors raised by pyqt-formstate."""


class UnknownFieldError(FormStateError, KeyError):
    """Raised when a field key is not declared in the form schema."""


class SchemaError(FormStateError, ValueError):
    """Raised when a field or form schema declaration is inconsistent."""


class FormTreeError(FormStateError):
    """Raised when a node cannot be attached to or detached from a form tree."""
