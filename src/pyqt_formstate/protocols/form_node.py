"""
Node ABC contract for form trees.

Defines the capability set shared by every node that can sit in a form tree,
so that a parent can fan lifecycle operations out to its children without
knowing whether a child is a single form or a collection of forms.

Design Philosophy:
- Explicit inheritance over duck typing
- Status is folded bottom-up on demand, never cached
- Lifecycle operations recurse depth-first into every descendant
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class FormNode(ABC):
    """
    ABC for nodes of a form tree (Form and FormCollection).

    All nodes must implement this to participate in validate/clear fan-out
    and in validated/valid aggregation.
    """

    @abstractmethod
    def validate(self) -> Any:
        """Validate this node and every descendant."""
        pass

    @abstractmethod
    def clear_validations(self) -> None:
        """Blank validation messages and reset the validated state of the subtree."""
        pass

    @abstractmethod
    def clear_fields(self) -> Any:
        """Reset every field of the subtree to its schema default."""
        pass

    @property
    @abstractmethod
    def validated(self) -> bool:
        """True if this node and every descendant has been validated."""
        pass

    @property
    @abstractmethod
    def valid(self) -> bool:
        """True if the subtree has been validated and carries no validation message."""
        pass

    @property
    def is_valid(self) -> bool:
        """Alias of ``valid``."""
        return self.valid

    @property
    @abstractmethod
    def read_only(self) -> bool:
        """Read-only flag of the node."""
        pass

    @read_only.setter
    @abstractmethod
    def read_only(self, read_only: bool) -> None:
        pass

    @property
    @abstractmethod
    def parent(self) -> Optional[Any]:
        """Form this node is attached to, or None for a root."""
        pass

    def _notification_parent(self) -> Optional['FormNode']:
        """Next node up the chain that should hear about changes to this one."""
        return self.parent
