"""
pyqt-formstate: hierarchical form state for PyQt6 applications.

Tracks field values and late validation for a declarative schema, and
composes forms into trees of nested forms and repeatable collections.

Architecture:
- Tier 1 (Core): Small utilities with no form logic
- Tier 2 (Protocols): FormNode ABC and configuration
- Tier 3 (Services): Qt change notification
- Tier 4 (Forms): FieldStore, Form and FormCollection

Key Features:
- Static-or-computed field options (title, read_only, required)
- Validation messages appear only after explicit validation
- Validated/valid status aggregated over the whole tree on demand
- Read-only cascade from any node to its descendants
- Qt signals for re-rendering after every mutation
"""

from __future__ import annotations

import importlib

__version__ = "0.1.0"

_EXPORTS = {
    "FieldSchema": ("pyqt_formstate.forms.schema", "FieldSchema"),
    "FormSchema": ("pyqt_formstate.forms.schema", "FormSchema"),
    "Static": ("pyqt_formstate.forms.schema", "Static"),
    "Computed": ("pyqt_formstate.forms.schema", "Computed"),
    "Form": ("pyqt_formstate.forms.form", "Form"),
    "FieldView": ("pyqt_formstate.forms.form", "FieldView"),
    "FormCollection": ("pyqt_formstate.forms.form_collection", "FormCollection"),
    "FormNode": ("pyqt_formstate.protocols.form_node", "FormNode"),
    "FormStateConfig": ("pyqt_formstate.protocols.form_config", "FormStateConfig"),
    "set_form_config": ("pyqt_formstate.protocols.form_config", "set_form_config"),
    "get_form_config": ("pyqt_formstate.protocols.form_config", "get_form_config"),
    "FormStateError": ("pyqt_formstate.exceptions", "FormStateError"),
    "UnknownFieldError": ("pyqt_formstate.exceptions", "UnknownFieldError"),
    "SchemaError": ("pyqt_formstate.exceptions", "SchemaError"),
    "FormTreeError": ("pyqt_formstate.exceptions", "FormTreeError"),
}


def __getattr__(name: str):
    if name in _EXPORTS:
        module_name, attr = _EXPORTS[name]
        module = importlib.import_module(module_name)
        value = getattr(module, attr)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["__version__", *_EXPORTS.keys()]
