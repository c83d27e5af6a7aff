"""
Form state containers.

Schema types, the Form container and FormCollection for repeatable
sub-forms.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .schema import FieldSchema, FormSchema, Static, Computed, as_option
    from .field_store import FieldState, FieldStore
    from .form import Form, FieldView
    from .form_collection import FormCollection

_EXPORTS = {
    "FieldSchema": ("pyqt_formstate.forms.schema", "FieldSchema"),
    "FormSchema": ("pyqt_formstate.forms.schema", "FormSchema"),
    "Static": ("pyqt_formstate.forms.schema", "Static"),
    "Computed": ("pyqt_formstate.forms.schema", "Computed"),
    "as_option": ("pyqt_formstate.forms.schema", "as_option"),
    "FieldState": ("pyqt_formstate.forms.field_store", "FieldState"),
    "FieldStore": ("pyqt_formstate.forms.field_store", "FieldStore"),
    "Form": ("pyqt_formstate.forms.form", "Form"),
    "FieldView": ("pyqt_formstate.forms.form", "FieldView"),
    "FormCollection": ("pyqt_formstate.forms.form_collection", "FormCollection"),
}


def __getattr__(name: str):
    if name in _EXPORTS:
        module_name, attr = _EXPORTS[name]
        module = importlib.import_module(module_name)
        value = getattr(module, attr)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_EXPORTS.keys())
