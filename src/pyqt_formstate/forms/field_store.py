"""Per-field value and validation message storage for a single form."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Tuple

from pyqt_formstate.exceptions import UnknownFieldError
from pyqt_formstate.protocols import get_form_config
from .schema import FormSchema

logger = logging.getLogger(__name__)


@dataclass
class FieldState:
    """Current value of a field and its last computed validation message."""
    value: Any
    validation_message: str = ""


class FieldStore:
    """
    One FieldState per schema key, created at construction and never removed.

    The store only holds data; deciding when messages are recomputed is the
    owning Form's job.
    """

    def __init__(self, schema: FormSchema):
        self._schema = schema
        self._states: Dict[str, FieldState] = {
            key: FieldState(value=field.initial_value())
            for key, field in schema.items()
        }

    def state(self, key: str) -> FieldState:
        try:
            return self._states[key]
        except KeyError:
            raise UnknownFieldError(f"Field {key!r} is not declared in the form schema") from None

    def keys(self) -> Tuple[str, ...]:
        """Snapshot of the field keys, safe to iterate while callbacks mutate the store."""
        return tuple(self._states.keys())

    def items(self) -> Iterator[Tuple[str, FieldState]]:
        return iter(tuple(self._states.items()))

    def values(self) -> Dict[str, Any]:
        """Value-only snapshot keyed like the schema."""
        return {key: state.value for key, state in self._states.items()}

    def messages(self) -> Dict[str, str]:
        return {key: state.validation_message for key, state in self._states.items()}

    def has_messages(self) -> bool:
        return any(state.validation_message for state in self._states.values())

    def reset_to_defaults(self) -> None:
        """Reinitialize every value from the schema.

        Messages survive unless the configuration asks for them to be cleared.
        """
        clear_messages = get_form_config().clear_messages_on_reset
        for key, field in self._schema.items():
            state = self._states[key]
            state.value = field.initial_value()
            if clear_messages:
                state.validation_message = ""
        logger.debug(f"Reset {len(self._states)} field(s) to defaults (clear_messages={clear_messages})")

    def clear_messages(self) -> None:
        for state in self._states.values():
            state.validation_message = ""
