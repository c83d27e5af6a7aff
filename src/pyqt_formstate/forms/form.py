"""Schema-bound form: field values, late validation and child composition."""

from __future__ import annotations

import logging
import weakref
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

from pyqt_formstate.core import Completed
from pyqt_formstate.exceptions import FormTreeError
from pyqt_formstate.protocols import FormNode
from pyqt_formstate.services import ChangeNotifier, FormSignals
from .field_store import FieldStore
from .schema import FieldSchema, FormSchema

if TYPE_CHECKING:
    from .form_collection import FormCollection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldView:
    """Snapshot returned by ``Form.get``; ``read_only`` is derived at read time."""
    value: Any
    validation_message: str
    read_only: bool
    schema: FieldSchema


class Form(FormNode):
    """
    Container of field values for one FormSchema, plus child forms and collections.

    Validation is late: ``set`` only re-runs a validator once the form itself has
    been validated, otherwise it blanks the field's message. ``validate`` and the
    other lifecycle operations recurse depth-first into every child.

    Status is never cached:
        form.validated  -> own flag AND every child validated
        form.valid      -> validated AND no own message AND every child valid

    Example:
        order = Form(order_schema)
        lines = FormCollection(line_schema, order)
        lines.add().set("quantity", 3)
        order.validate()
        order.valid
    """

    def __init__(self, schema: FormSchema, parent: Optional['Form'] = None, *,
                 collection: Optional['FormCollection'] = None):
        """
        Args:
            schema: Schema shared by reference, never copied
            parent: Form that fans lifecycle operations out to this one
            collection: Collection this form is a member of (set by FormCollection)
        """
        self._schema = schema
        self._store = FieldStore(schema)
        self._validated = False
        self._read_only = False
        self._children: List[FormNode] = []
        self._parent_ref = weakref.ref(parent) if parent is not None else None
        self._collection_ref = weakref.ref(collection) if collection is not None else None
        self._notifier = ChangeNotifier.instance()
        self.signals = FormSignals()

        if parent is not None:
            parent._children.append(self)

        logger.debug(f"Form created with {len(schema.fields)} field(s), parent={type(parent).__name__ if parent else None}")

    # ========== TREE ==========

    @property
    def schema(self) -> FormSchema:
        return self._schema

    @property
    def parent(self) -> Optional['Form']:
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def children(self) -> Tuple[FormNode, ...]:
        return tuple(self._children)

    def _notification_parent(self) -> Optional[FormNode]:
        # Members report through their collection, which reports to the parent
        if self._collection_ref is not None:
            collection = self._collection_ref()
            if collection is not None:
                return collection
        return self.parent

    def add_child(self, child: FormNode) -> FormNode:
        """Adopt ``child`` after construction.

        The child ends up exactly once in the child list. A parentless Form gets
        this form as its parent; a parentless FormCollection is adopted as a
        single node whose members it forwards to.
        """
        if any(existing is child for existing in self._children):
            logger.debug(f"add_child: {type(child).__name__} already a child, ignoring")
            return child

        from .form_collection import FormCollection

        if isinstance(child, FormCollection):
            if child.parent is self:
                raise FormTreeError("Members of this collection are already children of this form")
            if child.parent is not None or child.owner is not None:
                raise FormTreeError("Collection is already attached to another form")
            child._owner_ref = weakref.ref(self)
        elif isinstance(child, Form):
            if child is self:
                raise FormTreeError("A form cannot be its own child")
            current = child.parent
            if current is not None and current is not self:
                raise FormTreeError("Form is already attached to another parent")
            child._parent_ref = weakref.ref(self)
        else:
            raise FormTreeError(f"Cannot adopt {type(child).__name__}; expected Form or FormCollection")

        self._children.append(child)
        logger.debug(f"Adopted {type(child).__name__}, now {len(self._children)} child(ren)")
        self._notifier.mark(self)
        return child

    def remove_child(self, child: FormNode) -> None:
        """Detach ``child`` so it no longer takes part in this form's fan-out."""
        if isinstance(child, Form) and child._collection_ref is not None:
            collection = child._collection_ref()
            if collection is not None and any(member is child for member in collection.get()):
                raise FormTreeError("Form is still a collection member; use FormCollection.remove(form, detach=True)")

        for index, existing in enumerate(self._children):
            if existing is child:
                del self._children[index]
                break
        else:
            return

        from .form_collection import FormCollection

        if isinstance(child, FormCollection):
            child._owner_ref = None
        else:
            child._parent_ref = None
        logger.debug(f"Detached {type(child).__name__}, {len(self._children)} child(ren) left")
        self._notifier.mark(self)

    # ========== FIELD ACCESS ==========

    def get(self, key: str) -> FieldView:
        """Return value, validation message, effective read-only flag and schema of a field."""
        state = self._store.state(key)
        return FieldView(
            value=state.value,
            validation_message=state.validation_message,
            read_only=self.is_field_read_only(key),
            schema=self._schema.field(key),
        )

    def set(self, key: str, value: Any) -> None:
        """Write a field value.

        The message is recomputed only while the form's own ``validated`` flag is
        set; otherwise it is blanked. Then the field's ``on_change`` and the
        form's ``on_change_form`` run, synchronously.
        """
        field = self._schema.field(key)
        state = self._store.state(key)

        with self._notifier.batch():
            state.value = value
            self._notifier.mark(self)
            state.validation_message = field.validation_message(value, self) if self._validated else ""
            self.signals.field_changed.emit(key, value)

            if field.on_change is not None:
                field.on_change(value, field, self)
            self._handle_change_form()

    def is_field_read_only(self, key: str) -> bool:
        field = self._schema.field(key)
        if self._read_only:
            return True
        return bool(field.read_only.resolve(self))

    def is_field_required(self, key: str) -> bool:
        return bool(self._schema.field(key).required.resolve(self))

    def get_field_title(self, key: str) -> str:
        return self._schema.field(key).title.resolve(self)

    def get_field_hint(self, key: str) -> Any:
        return self._schema.field(key).hint

    def get_field_placeholder(self, key: str) -> str:
        return self._schema.field(key).placeholder

    @property
    def fields(self) -> Dict[str, Any]:
        """Value-only snapshot of every field."""
        return self._store.values()

    @fields.setter
    def fields(self, values: Mapping[str, Any]) -> None:
        """Overwrite the supplied values; ``None`` means "keep the current value".

        Lower level than ``set``: no revalidation and no per-field ``on_change``.
        """
        for key in values:
            self._schema.field(key)

        with self._notifier.batch():
            for key, value in values.items():
                if value is not None:
                    self._store.state(key).value = value
            self._notifier.mark(self)
            self._handle_change_form()

    def _handle_change_form(self) -> None:
        on_change_form = self._schema.on_change_form
        if on_change_form is not None:
            on_change_form(self)

    # ========== VALIDATION LIFECYCLE ==========

    def validate(self) -> None:
        """Recompute every message, mark the form validated and validate every child."""
        logger.debug(f"Validating form ({len(self._children)} child(ren))")
        with self._notifier.batch():
            self._notifier.mark(self)
            for key, state in self._store.items():
                state.validation_message = self._schema.field(key).validation_message(state.value, self)
            self._validated = True
            for child in list(self._children):
                child.validate()

    def validate_field(self, key: str) -> None:
        """Recompute one message regardless of the validated flag; no recursion."""
        field = self._schema.field(key)
        state = self._store.state(key)
        state.validation_message = field.validation_message(state.value, self)
        self._notifier.mark(self)

    def clear_validations(self) -> None:
        """Blank every message and return the whole subtree to the unvalidated state."""
        with self._notifier.batch():
            self._notifier.mark(self)
            self._store.clear_messages()
            self._validated = False
            for child in list(self._children):
                child.clear_validations()

    def clear_fields(self) -> Completed:
        """Reset the subtree to schema defaults, then fire ``on_change_form``.

        Work is done before returning; the result may be awaited but need not be.
        """
        logger.debug(f"Clearing fields ({len(self._children)} child(ren))")
        with self._notifier.batch():
            self._notifier.mark(self)
            self._store.reset_to_defaults()
            self._validated = False
            for child in list(self._children):
                child.clear_fields()
            self._handle_change_form()
        return Completed()

    # ========== STATUS ==========

    @property
    def validated(self) -> bool:
        """True if this form was validated and every child reports validated."""
        return self._validated and all(child.validated for child in list(self._children))

    @property
    def valid(self) -> bool:
        """True if validated, no own field carries a message and every child is valid."""
        if not self.validated:
            return False
        if self._store.has_messages():
            return False
        return all(child.valid for child in list(self._children))

    @property
    def read_only(self) -> bool:
        return self._read_only

    @read_only.setter
    def read_only(self, read_only: bool) -> None:
        """Set the flag here and overwrite it on every child, transitively."""
        with self._notifier.batch():
            self._read_only = read_only
            self._notifier.mark(self)
            for child in list(self._children):
                child.read_only = read_only

    def __repr__(self) -> str:
        return f"Form(fields={self.fields!r}, validated={self._validated}, children={len(self._children)})"
