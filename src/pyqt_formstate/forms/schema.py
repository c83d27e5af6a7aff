"""
Declarative form schema.

A FormSchema maps field keys to FieldSchema entries. Options that may be
either a plain value or a function of the owning form (title, read_only,
required) are normalized once, at construction, into the tagged union
``Static | Computed`` so that evaluation is a single ``resolve(form)`` call.

Example:
    schema = FormSchema(fields={
        "age": FieldSchema(
            title="Age",
            default=0,
            validate=lambda value, field, form: "too young" if value < 18 else "",
        ),
        "tags": FieldSchema(title="Tags", default_factory=list),
    })
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Generic, Iterator, Mapping, Optional, Tuple, TypeVar, Union

from pyqt_formstate.exceptions import SchemaError, UnknownFieldError
from pyqt_formstate.protocols import get_form_config

if TYPE_CHECKING:
    from .form import Form

T = TypeVar("T")

Validator = Callable[[Any, "FieldSchema", "Form"], str]
ChangeCallback = Callable[[Any, "FieldSchema", "Form"], None]
FormCallback = Callable[["Form"], None]


@dataclass(frozen=True)
class Static(Generic[T]):
    """Option whose value does not depend on the form."""
    value: T

    def resolve(self, form: 'Form') -> T:
        return self.value


@dataclass(frozen=True)
class Computed(Generic[T]):
    """Option evaluated against the owning form on every read."""
    compute: Callable[['Form'], T]

    def resolve(self, form: 'Form') -> T:
        return self.compute(form)


FieldOption = Union[Static[T], Computed[T]]


def as_option(value: Union[T, Callable[['Form'], T], FieldOption]) -> FieldOption:
    """Wrap a schema value as Static or Computed; already wrapped values pass through."""
    if isinstance(value, (Static, Computed)):
        return value
    if callable(value):
        return Computed(value)
    return Static(value)


@dataclass(frozen=True, eq=False)
class FieldSchema:
    """
    Schema entry for a single field.

    Attributes:
        title: Field title, or a function of the form returning it
        hint: Opaque display payload, never interpreted
        read_only: Read-only flag, or a function of the form returning it
        default: Literal default value
        default_factory: Zero-argument factory producing the default value
        validate: ``(value, field, form) -> message``; empty message means valid
        required: Required flag, or a function of the form returning it
        placeholder: Opaque placeholder text
        on_change: ``(value, field, form)`` callback invoked after ``Form.set``
    """
    title: Union[str, Callable[['Form'], str], FieldOption] = ""
    hint: Any = None
    read_only: Union[bool, Callable[['Form'], bool], FieldOption] = False
    default: Any = None
    default_factory: Optional[Callable[[], Any]] = None
    validate: Optional[Validator] = None
    required: Union[bool, Callable[['Form'], bool], FieldOption] = False
    placeholder: str = ""
    on_change: Optional[ChangeCallback] = None

    def __post_init__(self):
        if self.default is not None and self.default_factory is not None:
            raise SchemaError("cannot specify both default and default_factory")
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "title", as_option(self.title))
        object.__setattr__(self, "read_only", as_option(self.read_only))
        object.__setattr__(self, "required", as_option(self.required))

    def initial_value(self) -> Any:
        """Produce a fresh default value for this field."""
        if self.default_factory is not None:
            return self.default_factory()
        if get_form_config().copy_literal_defaults:
            return copy.deepcopy(self.default)
        return self.default

    def validation_message(self, value: Any, form: 'Form') -> str:
        """Run the validator against ``value``; fields without one are always valid."""
        if self.validate is None:
            return ""
        return self.validate(value, self, form)


@dataclass(frozen=True, eq=False)
class FormSchema:
    """
    Schema of a whole form.

    Attributes:
        fields: Mapping of field key to FieldSchema; keys are fixed after construction
        on_change_form: Callback invoked after any field write or bulk assignment
    """
    fields: Mapping[str, FieldSchema] = field(default_factory=dict)
    on_change_form: Optional[FormCallback] = None

    def __post_init__(self):
        for key, entry in self.fields.items():
            if not isinstance(key, str):
                raise SchemaError(f"Field keys must be strings, got {key!r}")
            if not isinstance(entry, FieldSchema):
                raise SchemaError(f"Field {key!r} must be a FieldSchema, got {type(entry).__name__}")
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def field(self, key: str) -> FieldSchema:
        """Return the FieldSchema for ``key``; fail loud on undeclared keys."""
        try:
            return self.fields[key]
        except KeyError:
            raise UnknownFieldError(f"Field {key!r} is not declared in the form schema") from None

    def keys(self) -> Tuple[str, ...]:
        return tuple(self.fields.keys())

    def items(self) -> Iterator[Tuple[str, FieldSchema]]:
        return iter(tuple(self.fields.items()))

    def __contains__(self, key: object) -> bool:
        return key in self.fields
