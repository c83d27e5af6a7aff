"""
Change notification for form trees.

Every form node owns a FormSignals QObject. Mutations mark the node that
changed; the notifier walks up the tree and emits ``changed`` once per
affected node after the mutation has been applied.

Batching:
    Fan-out operations (validate, clear_fields, ...) touch many nodes. They
    run inside ``ChangeNotifier.batch()`` so that every affected node emits
    ``changed`` exactly once when the outermost batch exits, instead of once
    per field and per descendant.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Dict

from PyQt6.QtCore import QObject, pyqtSignal

from pyqt_formstate.protocols import get_form_config

if TYPE_CHECKING:
    from pyqt_formstate.protocols import FormNode

logger = logging.getLogger(__name__)


class FormSignals(QObject):
    """Signals emitted by a single form node."""

    changed = pyqtSignal()  # node or a descendant changed
    field_changed = pyqtSignal(str, object)  # field key, new value


class ChangeNotifier:
    """Singleton notifier for all form nodes. Holds only the pending batch."""

    _instance = None

    @classmethod
    def instance(cls) -> 'ChangeNotifier':
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def __init__(self):
        self._depth = 0
        self._pending: Dict[int, 'FormNode'] = {}

    @property
    def batching(self) -> bool:
        return self._depth > 0

    @contextmanager
    def batch(self):
        """Defer ``changed`` emissions until the outermost batch exits.

        Pending notifications are flushed even if the body raises, so that
        observers see the mutations that were applied before the error.
        """
        self._depth += 1
        try:
            yield self
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._flush()

    def mark(self, node: 'FormNode') -> None:
        """Record that ``node`` changed; its ancestors are notified as well."""
        current = node
        while current is not None:
            self._pending.setdefault(id(current), current)
            current = current._notification_parent()

        if self._depth == 0:
            self._flush()

    def _flush(self) -> None:
        # Slots may mutate the tree again; those marks land in a fresh batch.
        while self._pending:
            nodes = list(self._pending.values())
            self._pending.clear()
            if get_form_config().debug_notifications:
                logger.debug(f"Emitting changed on {len(nodes)} node(s): {[type(n).__name__ for n in nodes]}")
            for node in nodes:
                node.signals.changed.emit()
