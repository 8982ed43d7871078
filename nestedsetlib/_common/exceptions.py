"""Error hierarchy for nestedsetlib.

Every rejected operation raises a specific subclass of NestedSetError that
names the offending node and the attempted operation. Preconditions are
checked before any write is issued, so none of these errors leave a store
partially updated.
"""

from typing import Any, List, Optional, Sequence


class NestedSetError(Exception):
    """Base class for all nested-set errors."""

    def __init__(self, message: str, name: Optional[str] = None,
                 operation: Optional[str] = None):
        super().__init__(message)
        self.name = name
        self.operation = operation


class InvalidNameError(NestedSetError, ValueError):
    """Raised when a node name is missing or empty."""
    pass


class NodeNotFoundError(NestedSetError, LookupError):
    """Raised when a referenced node does not exist."""

    def __init__(self, name: Optional[str], operation: Optional[str] = None,
                 role: str = "node"):
        super().__init__(f'{role} "{name}" does not exist', name, operation)
        self.role = role


class ParentNotFoundError(NodeNotFoundError):
    """Raised when the parent given to add_node does not exist."""

    def __init__(self, name: Optional[str], operation: Optional[str] = "add"):
        super().__init__(name, operation, role="parent")


class DuplicateNameError(NestedSetError):
    """Raised when adding a node whose name is already taken."""

    def __init__(self, name: str, operation: Optional[str] = "add"):
        super().__init__(f'node with name "{name}" already exists', name, operation)


class SelfMoveError(NestedSetError):
    """Raised when a node is moved under itself."""

    def __init__(self, name: str):
        super().__init__(f'cannot move "{name}" under itself', name, "move")


class CycleViolationError(NestedSetError):
    """Raised when the move destination lies inside the moved subtree."""

    def __init__(self, name: str, destination: str):
        super().__init__(
            f'"{destination}" is a descendant of "{name}"', name, "move"
        )
        self.destination = destination


class RootOperationError(NestedSetError):
    """Raised when the root is the subject of a remove or move."""

    def __init__(self, name: str, operation: str):
        super().__init__(f'cannot {operation} the root node "{name}"', name, operation)


class NoLegalMoveError(NestedSetError):
    """Raised when no legal random move can be found."""

    def __init__(self, message: str):
        super().__init__(message, None, "move_random")


class InvariantViolationError(NestedSetError):
    """Raised when validation finds a broken tree.

    This indicates a bug in the engine or a corrupted store, never a usage
    error. The mutation history leading to the failure is attached.
    """

    def __init__(self, violations: Sequence[str],
                 history: Optional[Sequence[Any]] = None):
        self.violations: List[str] = list(violations)
        self.history: List[Any] = list(history or [])
        message = "Tree not valid\n- " + "\n- ".join(self.violations)
        if self.history:
            message += f"\nafter {len(self.history)} mutation(s), last: {self.history[-1]}"
        super().__init__(message, None, "validate")


class ConfigurationError(NestedSetError):
    """Raised when a configuration cannot be turned into a working store."""

    def __init__(self, message: str):
        super().__init__(message, None, "configure")
