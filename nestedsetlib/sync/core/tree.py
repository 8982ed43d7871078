"""Tree operations engine for nestedsetlib.

NestedSetTree implements add, remove and move on top of any NestedSetStore.
Every mutation resolves names first, checks all preconditions, and only then
issues its batch of store writes inside one store transaction. The engine
keeps no state besides the store, its config and a bounded history of
successful mutations.
"""

import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterable, List, Optional, Tuple

from ..._common.config import TreeConfig
from ..._common.exceptions import (
    CycleViolationError,
    DuplicateNameError,
    InvalidNameError,
    InvariantViolationError,
    NodeNotFoundError,
    NoLegalMoveError,
    ParentNotFoundError,
    RootOperationError,
    SelfMoveError,
)
from ..._common.node import NestedSetNode
from ..._common.validation import find_violations
from .store import BoundShift, NestedSetStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Mutation:
    """Record of one successful mutation."""
    operation: str
    arguments: Tuple[str, ...]
    message: str

    def __str__(self) -> str:
        return f"{self.operation}({', '.join(self.arguments)})"


class NestedSetTree:
    """A tree stored with the nested-set encoding.

    The tree is an explicit object owned by the caller. Opening it over an
    empty store creates the root with bounds [1, 2]; opening it over a
    populated store adopts the existing nodes.

    Example:
        >>> tree = NestedSetTree(MemoryStore())
        >>> tree.add_node("a")
        'Added a'
        >>> tree.add_node("aa", "a")
        'Added aa'
        >>> tree.get_parents("aa")
        ['root', 'a']
    """

    def __init__(self, store: NestedSetStore, config: Optional[TreeConfig] = None):
        """Open a tree over a store.

        Args:
            store: Store holding (or about to hold) the nodes
            config: Engine configuration, defaults to TreeConfig()
        """
        self.store = store
        self.config = config or TreeConfig()
        self.root_name = self.config.root_name
        self.history: Deque[Mutation] = deque(maxlen=self.config.history_limit)
        self._rng = random.Random(self.config.seed)
        self._ensure_root()

    def _ensure_root(self) -> None:
        if self.store.exists(self.root_name):
            return
        if self.store.count() > 0:
            raise InvalidNameError(
                f'store is not empty but has no root named "{self.root_name}"',
                self.root_name, "open",
            )
        with self.store.transaction():
            self.store.insert(NestedSetNode(self.root_name, None, 1, 2, 0))
        logger.debug("Created root %s", self.root_name)

    # Lookups

    def _resolve(self, name: Optional[str], operation: str, role: str = "node") -> NestedSetNode:
        """Get a node by its name.

        Args:
            name: Node name
            operation: Operation name, reported in errors
            role: What the name stands for, reported in errors

        Raises:
            InvalidNameError: If name is missing
            NodeNotFoundError: If no node has this name
        """
        if not name:
            raise InvalidNameError(f"{role} is missing", name, operation)
        node = self.store.get(name)
        if node is None:
            if role == "parent":
                raise ParentNotFoundError(name, operation)
            raise NodeNotFoundError(name, operation, role=role)
        return node

    def get_node(self, name: str) -> NestedSetNode:
        """Get a detached copy of a node."""
        return self._resolve(name, "get")

    def nodes(self) -> List[NestedSetNode]:
        """All nodes in preorder."""
        return self.store.all()

    def is_descendant(self, name: str, potential_ancestor: str) -> bool:
        node = self._resolve(name, "get")
        ancestor = self._resolve(potential_ancestor, "get", role="ancestor")
        return ancestor.contains(node)

    def get_children(self, name: str, max_depth: Optional[int] = None) -> List[str]:
        """Get names of the nodes below a node, in preorder.

        Args:
            name: Subtree root
            max_depth: Levels to descend; None or <= 0 means unbounded,
                1 means direct children only

        Returns:
            Descendant names
        """
        node = self._resolve(name, "get_children")
        limit = max_depth if max_depth is not None and max_depth > 0 else None
        return [n.name for n in self.store.descendants(node, limit)]

    def get_parents(self, name: str) -> List[str]:
        """Get names of a node's ancestors, from the root downward."""
        node = self._resolve(name, "get_parents")
        return [n.name for n in self.store.ancestors(node)]

    def query(self, name: str, exclude: Iterable[str] = (),
              max_depth: Optional[int] = None,
              include_self: bool = False) -> List[NestedSetNode]:
        """Get a subtree with whole branches pruned.

        Args:
            name: Subtree root
            exclude: Names whose entire subtrees are left out
            max_depth: Levels to descend; None or <= 0 means unbounded
            include_self: Include the subtree root itself

        Returns:
            Matching nodes in preorder
        """
        node = self._resolve(name, "query")
        excluded = [self._resolve(e, "query", role="excluded node") for e in exclude]
        limit = max_depth if max_depth is not None and max_depth > 0 else None
        return [
            n for n in self.store.descendants(node, limit, include_self=include_self)
            if not any(e.covers(n) for e in excluded)
        ]

    def __len__(self) -> int:
        return self.store.count()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.store.exists(name)

    # Mutations

    def add_node(self, name: str, parent_name: Optional[str] = None) -> str:
        """Add a leaf as the last child of a parent.

        Opens a gap of two just before the parent's closing bound and places
        the new node in it.

        Args:
            name: Name of the new node
            parent_name: Existing parent, defaults to the root

        Returns:
            Outcome message

        Raises:
            InvalidNameError: If name or parent_name is empty
            DuplicateNameError: If name is taken
            ParentNotFoundError: If the parent does not exist
        """
        if not name:
            raise InvalidNameError("name is missing", name, "add")
        if self.store.exists(name):
            raise DuplicateNameError(name)
        if parent_name is None:
            parent_name = self.root_name
        parent = self._resolve(parent_name, "add", role="parent")

        pr = parent.right
        with self.store.transaction():
            self.store.shift_bounds(BoundShift("right", 2, minimum=pr))
            self.store.shift_bounds(BoundShift("left", 2, minimum=pr + 1))
            self.store.insert(NestedSetNode(name, parent.name, pr, pr + 1, parent.depth + 1))
            mutation = self._check_write("add", (name, parent.name), f"Added {name}")
        self.history.append(mutation)
        return mutation.message

    def remove_node(self, name: str) -> str:
        """Remove a node together with its whole subtree.

        Raises:
            NodeNotFoundError: If the node does not exist
            RootOperationError: If the node is the root
        """
        node = self._resolve(name, "remove")
        if node.is_root:
            raise RootOperationError(node.name, "remove")

        width = node.width
        with self.store.transaction():
            removed = self.store.delete_range(node.left, node.right)
            self.store.shift_bounds(BoundShift("right", -width, minimum=node.right + 1))
            self.store.shift_bounds(BoundShift("left", -width, minimum=node.right + 1))
            mutation = self._check_write("remove", (name,), f"Removed {name}")
        self.history.append(mutation)
        logger.debug("Removed %s and %d descendant(s)", name, removed - 1)
        return mutation.message

    def move_node(self, name: str, destination: str) -> str:
        """Move a subtree to become the last child of another node.

        The move runs in four phases, in this order:

        1. Point the node at its new parent and hide the subtree by negating
           its bounds, so the next phase cannot touch it.
        2. Decide the direction: ``up`` when the destination lies entirely
           before the subtree.
        3. Shift the visible bounds between the old slot and the
           destination's closing bound, closing the vacated gap and opening
           one of the same width next to the destination.
        4. Reveal the hidden nodes at ``shift - bound`` and adjust depths.

        Raises:
            NodeNotFoundError: If either name does not exist
            RootOperationError: If the node is the root
            SelfMoveError: If destination is the node itself
            CycleViolationError: If destination lies inside the subtree
        """
        node = self._resolve(name, "move")
        dest = self._resolve(destination, "move", role="destination")
        if node.is_root:
            raise RootOperationError(node.name, "move")
        if dest.name == node.name:
            raise SelfMoveError(node.name)
        if node.contains(dest):
            raise CycleViolationError(node.name, dest.name)

        size = node.width
        lm, rm = node.left, node.right
        rd = dest.right

        with self.store.transaction():
            # 1. detach
            self.store.set_parent_and_depth(node.name, dest.name)
            self.store.hide_range(lm, rm)

            # 2. direction
            up = dest.left < lm and dest.right < rm

            # 3. close the old gap, open the new one
            if up:
                self.store.shift_bounds(BoundShift("left", size, minimum=rd, maximum=rm - 1))
                self.store.shift_bounds(BoundShift("right", size, minimum=rd, maximum=rm - 1))
            else:
                self.store.shift_bounds(BoundShift("left", -size, minimum=rm + 1, maximum=rd - 1))
                self.store.shift_bounds(BoundShift("right", -size, minimum=rm + 1, maximum=rd - 1))

            # 4. reinsert
            shift = rd - lm + (0 if up else -size)
            delta_depth = dest.depth - node.depth + 1
            self.store.reveal_hidden(shift, delta_depth)

            mutation = self._check_write(
                "move", (node.name, dest.name), f"Moved {node.name} to {dest.name}"
            )
        self.history.append(mutation)
        logger.debug("Moved %s (%d node(s)) %s to %s", node.name, size // 2,
                     "up" if up else "down", dest.name)
        return mutation.message

    def move_random_node(self, rng: Optional[random.Random] = None) -> Tuple[str, str]:
        """Move a randomly chosen node under a randomly chosen destination.

        Samples pairs uniformly until one is a legal move, giving up after
        ``config.max_move_attempts`` tries.

        Args:
            rng: Random source, defaults to the tree's own seeded generator

        Returns:
            (moved node name, destination name)

        Raises:
            NoLegalMoveError: If the tree has fewer than 3 nodes or no legal
                pair was sampled
        """
        rng = rng or self._rng
        nodes = self.store.all()
        if len(nodes) < 3:
            raise NoLegalMoveError(f"Tree is too small: {len(nodes)} node(s), need at least 3")

        for _ in range(self.config.max_move_attempts):
            node = rng.choice(nodes)
            dest = rng.choice(nodes)
            if node.is_root or dest.name == node.name or node.contains(dest):
                continue  # retry
            self.move_node(node.name, dest.name)
            return node.name, dest.name

        raise NoLegalMoveError(
            f"No legal move found after {self.config.max_move_attempts} attempts"
        )

    # Validation

    def validate(self) -> List[str]:
        """Check every nested-set invariant.

        Returns:
            List of violation descriptions (empty if valid)
        """
        errors = find_violations(self.store.all())
        if not errors and not self.store.exists(self.root_name):
            errors.append(f'Root "{self.root_name}" is missing')
        return errors

    def is_valid(self) -> bool:
        return not self.validate()

    def check(self) -> None:
        """Validate and raise on the first sign of corruption.

        Raises:
            InvariantViolationError: With the violations and the mutation history
        """
        errors = self.validate()
        if errors:
            raise InvariantViolationError(errors, list(self.history))

    def _check_write(self, operation: str, arguments: Tuple[str, ...], message: str) -> Mutation:
        """Build the mutation record, validating first if configured.

        Called inside the write transaction, so a failed validation rolls the
        write back. The caller appends the record to the history only after
        the transaction has committed.
        """
        mutation = Mutation(operation, arguments, message)
        if self.config.validate_writes:
            errors = self.validate()
            if errors:
                raise InvariantViolationError(errors, list(self.history) + [mutation])
        return mutation

    def __repr__(self) -> str:
        return f"NestedSetTree(store={self.store!r}, root={self.root_name!r})"
