"""Ordered collection of sibling forms sharing one schema."""

from __future__ import annotations

import logging
import weakref
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from pyqt_formstate.core import Completed
from pyqt_formstate.protocols import FormNode, get_form_config
from pyqt_formstate.services import ChangeNotifier, FormSignals
from .form import Form
from .schema import FormSchema

logger = logging.getLogger(__name__)


class FormCollection(FormNode):
    """
    Repeatable sub-form, e.g. the line items of an order.

    Members are attached to the collection's parent form, not to the
    collection: the parent's own fan-out and aggregation see every member
    directly. The collection forwards lifecycle operations to its members and
    ANDs their status.

    Known limitation:
        ``remove`` and bulk ``fields`` assignment leave discarded members in the
        parent's child list, so the parent keeps validating and resetting them.
        Pass ``detach=True`` to ``remove`` or enable
        ``FormStateConfig.detach_removed_members`` to drop them. A form that has
        left the collection no longer reports changes to it and may also be
        dropped later with ``Form.remove_child``; a live member may not.
    """

    def __init__(self, schema: FormSchema, parent: Optional[Form] = None):
        self._schema = schema
        self._parent_ref = weakref.ref(parent) if parent is not None else None
        self._owner_ref = None  # set when a parentless collection is adopted via Form.add_child
        self._members: List[Form] = []
        self._read_only = False
        self._notifier = ChangeNotifier.instance()
        self.signals = FormSignals()

    @property
    def schema(self) -> FormSchema:
        return self._schema

    @property
    def parent(self) -> Optional[Form]:
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def owner(self) -> Optional[Form]:
        """Form that adopted this collection as a child node, if any."""
        return self._owner_ref() if self._owner_ref is not None else None

    def _notification_parent(self) -> Optional[FormNode]:
        return self.parent or self.owner

    # ========== MEMBERSHIP ==========

    def add_with_options(self, schema: Optional[FormSchema] = None) -> Form:
        """Append a member built from ``schema`` (default: the collection schema)."""
        form = Form(schema if schema is not None else self._schema, self.parent, collection=self)
        self._members.append(form)
        logger.debug(f"Added member #{len(self._members)}")
        self._notifier.mark(self)
        return form

    def add(self) -> Form:
        """Append a member built from the collection schema."""
        return self.add_with_options(self._schema)

    def remove(self, form: Form, detach: Optional[bool] = None) -> None:
        """Remove the first member identical to ``form``; no-op if it is not a member.

        Args:
            form: Member to remove
            detach: Also drop it from the parent's child list; None uses the config
        """
        for index, member in enumerate(self._members):
            if member is form:
                del self._members[index]
                break
        else:
            logger.warning("remove: form is not a member of this collection, ignoring")
            return

        with self._notifier.batch():
            self._notifier.mark(self)
            self._detach(form, detach)

    def _detach(self, form: Form, detach: Optional[bool]) -> None:
        form._collection_ref = None
        if detach is None:
            detach = get_form_config().detach_removed_members
        parent = self.parent
        if detach and parent is not None:
            parent.remove_child(form)

    def get(self) -> List[Form]:
        """Snapshot of the members in insertion order."""
        return list(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Form]:
        return iter(list(self._members))

    @property
    def fields(self) -> List[Dict[str, Any]]:
        """Value-only snapshot of every member."""
        return [member.fields for member in self._members]

    @fields.setter
    def fields(self, values: Sequence[Mapping[str, Any]]) -> None:
        """Replace every member with one fresh member per value set, in order.

        Every key is checked first, so an undeclared key leaves the collection untouched.
        """
        values = list(values)
        for item in values:
            for key in item:
                self._schema.field(key)

        with self._notifier.batch():
            discarded = self._members
            self._members = []
            for form in discarded:
                self._detach(form, None)
            for item in values:
                self.add().fields = item
            self._notifier.mark(self)
        logger.debug(f"Replaced {len(discarded)} member(s) with {len(self._members)}")

    # ========== LIFECYCLE ==========

    def validate(self) -> Completed:
        """Validate every member; may be awaited, never suspends."""
        with self._notifier.batch():
            for member in list(self._members):
                member.validate()
        return Completed()

    def clear_fields(self) -> None:
        with self._notifier.batch():
            for member in list(self._members):
                member.clear_fields()

    def clear_validations(self) -> None:
        with self._notifier.batch():
            for member in list(self._members):
                member.clear_validations()

    # ========== STATUS ==========

    @property
    def validated(self) -> bool:
        """True if every member is validated; vacuously true when empty."""
        return all(member.validated for member in list(self._members))

    @property
    def valid(self) -> bool:
        """True if every member is valid; vacuously true when empty."""
        return all(member.valid for member in list(self._members))

    @property
    def read_only(self) -> bool:
        """Last value assigned to the collection."""
        return self._read_only

    @read_only.setter
    def read_only(self, read_only: bool) -> None:
        """Forward to every current member; later members start editable."""
        with self._notifier.batch():
            self._read_only = read_only
            self._notifier.mark(self)
            for member in list(self._members):
                member.read_only = read_only

    def __repr__(self) -> str:
        return f"FormCollection(members={len(self._members)})"
