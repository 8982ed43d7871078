"""Async facade over the nested-set engine.

Every call runs the blocking engine in a worker thread and all calls share
one asyncio.Lock, so concurrent tasks are applied one at a time and never
observe a half-applied mutation.
"""

import asyncio
import logging
from typing import Any, Callable, Iterable, List, Optional, Tuple, TypeVar

from .._common.config import TreeConfig
from .._common.node import NestedSetNode
from ..sync.core.tree import Mutation, NestedSetTree
from ..sync.api import fuzz_moves, open_tree

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncNestedSetTree:
    """Serialize asyncio callers through one NestedSetTree.

    Example:
        >>> atree = await open_tree_async(backend="sql")
        >>> await atree.add_node("a")
        'Added a'
        >>> await atree.get_children("root")
        ['a']
    """

    def __init__(self, tree: NestedSetTree):
        """Wrap an existing tree.

        Args:
            tree: Tree whose store may be used from a worker thread
        """
        self._tree = tree
        self._lock = asyncio.Lock()

    @property
    def tree(self) -> NestedSetTree:
        return self._tree

    @property
    def root_name(self) -> str:
        return self._tree.root_name

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        """Run func in a worker thread while holding the lock.

        A worker thread cannot be interrupted. If the caller is cancelled,
        the lock is held until the thread finishes and only then is the
        cancellation passed on, so the next call never overlaps a running one.
        """
        async with self._lock:
            task = asyncio.ensure_future(asyncio.to_thread(func, *args))
            try:
                return await asyncio.shield(task)
            except asyncio.CancelledError:
                while not task.done():
                    try:
                        await asyncio.wait({task})
                    except asyncio.CancelledError:
                        continue
                if not task.cancelled() and task.exception() is not None:
                    logger.warning("Cancelled call to %s failed: %s",
                                   getattr(func, "__name__", func), task.exception())
                raise

    # Reads

    async def get_node(self, name: str) -> NestedSetNode:
        return await self._run(self._tree.get_node, name)

    async def nodes(self) -> List[NestedSetNode]:
        return await self._run(self._tree.nodes)

    async def get_children(self, name: str, max_depth: Optional[int] = None) -> List[str]:
        return await self._run(self._tree.get_children, name, max_depth)

    async def get_parents(self, name: str) -> List[str]:
        return await self._run(self._tree.get_parents, name)

    async def query(self, name: str, exclude: Iterable[str] = (),
                    max_depth: Optional[int] = None,
                    include_self: bool = False) -> List[NestedSetNode]:
        return await self._run(self._tree.query, name, tuple(exclude), max_depth, include_self)

    async def count(self) -> int:
        return await self._run(len, self._tree)

    # Mutations

    async def add_node(self, name: str, parent_name: Optional[str] = None) -> str:
        return await self._run(self._tree.add_node, name, parent_name)

    async def remove_node(self, name: str) -> str:
        return await self._run(self._tree.remove_node, name)

    async def move_node(self, name: str, destination: str) -> str:
        return await self._run(self._tree.move_node, name, destination)

    async def move_random_node(self) -> Tuple[str, str]:
        return await self._run(self._tree.move_random_node)

    async def fuzz_moves(self, iterations: int, validate_every: int = 1) -> List[Mutation]:
        """Run fuzz_moves() while holding the lock for the whole run."""
        return await self._run(fuzz_moves, self._tree, iterations, None, validate_every)

    # Validation

    async def validate(self) -> List[str]:
        return await self._run(self._tree.validate)

    async def check(self) -> None:
        await self._run(self._tree.check)

    # Lifecycle

    async def close(self) -> None:
        await self._run(self._tree.store.close)

    async def __aenter__(self) -> "AsyncNestedSetTree":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"AsyncNestedSetTree({self._tree!r})"


async def open_tree_async(config: Optional[TreeConfig] = None,
                          backend: Optional[str] = None,
                          **kwargs) -> AsyncNestedSetTree:
    """Async counterpart of sync.open_tree().

    Building the store can create a schema, so it runs in a worker thread too.
    """
    tree = await asyncio.to_thread(open_tree, config, backend, **kwargs)
    logger.debug("Opened %r for async use", tree)
    return AsyncNestedSetTree(tree)
