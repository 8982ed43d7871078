"""Tests for the async facade."""

import asyncio
import threading
import time
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from nestedsetlib import CycleViolationError, NodeNotFoundError
from nestedsetlib.aio import AsyncNestedSetTree, TreeConfig, open_tree_async
from nestedsetlib.sync import MemoryStore, NestedSetTree, REFERENCE_FOREST


async def build_async(atree, edges=REFERENCE_FOREST):
    for name, parent in edges:
        await atree.add_node(name, parent)
    return atree


@pytest.mark.asyncio
@pytest.mark.parametrize("backend", ["memory", "sql"])
async def test_basic_operations(backend):
    async with await open_tree_async(backend=backend) as atree:
        assert await atree.add_node("a") == "Added a"
        await atree.add_node("aa", "a")
        await atree.add_node("b")

        assert await atree.get_children("root") == ["a", "aa", "b"]
        assert await atree.get_parents("aa") == ["root", "a"]
        assert await atree.move_node("aa", "b") == "Moved aa to b"
        assert await atree.get_parents("aa") == ["root", "b"]
        assert await atree.remove_node("a") == "Removed a"
        assert await atree.count() == 3
        assert await atree.validate() == []


@pytest.mark.asyncio
async def test_errors_propagate():
    atree = await open_tree_async()
    await atree.add_node("a")
    await atree.add_node("aa", "a")

    with pytest.raises(CycleViolationError):
        await atree.move_node("a", "aa")
    with pytest.raises(NodeNotFoundError):
        await atree.get_node("zz")
    await atree.check()


@pytest.mark.asyncio
async def test_concurrent_adds_are_serialized():
    atree = await open_tree_async(backend="sql")
    try:
        await atree.add_node("a")
        await atree.add_node("b")
        names = [f"n{i}" for i in range(40)]
        await asyncio.gather(*(
            atree.add_node(name, "a" if i % 2 else "b")
            for i, name in enumerate(names)
        ))

        assert await atree.count() == 43
        assert await atree.validate() == []
        assert len(await atree.get_children("a", 1)) == 20
    finally:
        await atree.close()


@pytest.mark.asyncio
async def test_concurrent_mixed_mutations_stay_valid():
    atree = AsyncNestedSetTree(NestedSetTree(MemoryStore(), TreeConfig(seed=11)))
    await build_async(atree)

    tasks = [atree.move_random_node() for _ in range(30)]
    tasks += [atree.add_node(f"x{i}") for i in range(10)]
    tasks += [atree.query("root", max_depth=2) for _ in range(10)]
    await asyncio.gather(*tasks)

    assert await atree.count() == 26
    assert await atree.validate() == []


@pytest.mark.asyncio
async def test_fuzz_moves():
    atree = await open_tree_async(seed=5)
    await build_async(atree)
    moves = await atree.fuzz_moves(200, validate_every=20)
    assert len(moves) == 200
    assert await atree.validate() == []


@pytest.mark.asyncio
async def test_query_and_nodes():
    atree = await open_tree_async()
    await build_async(atree)

    pruned = await atree.query("root", exclude=["a", "b"])
    assert [n.name for n in pruned] == ["c", "cc", "cb"]
    nodes = await atree.nodes()
    assert nodes[0].name == atree.root_name
    assert atree.tree.get_node("c") == await atree.get_node("c")


class SlowStore(MemoryStore):
    """MemoryStore whose bound shifts block, and which records overlapping writes."""

    def __init__(self, delay=0.2):
        super().__init__()
        self.delay = delay
        self.active = 0
        self.overlapped = False
        self._guard = threading.Lock()

    def shift_bounds(self, shift):
        with self._guard:
            self.active += 1
            self.overlapped = self.overlapped or self.active > 1
        try:
            time.sleep(self.delay)
            return super().shift_bounds(shift)
        finally:
            with self._guard:
                self.active -= 1


@pytest.mark.asyncio
async def test_cancelled_mutation_finishes_before_next_call():
    store = SlowStore()
    atree = AsyncNestedSetTree(NestedSetTree(store))

    pending = asyncio.ensure_future(atree.add_node("a"))
    await asyncio.sleep(0.05)
    pending.cancel()
    with pytest.raises(asyncio.CancelledError):
        await pending

    await atree.add_node("b")

    assert not store.overlapped
    assert await atree.get_children("root") == ["a", "b"]
    assert await atree.validate() == []


@pytest.mark.asyncio
async def test_timed_out_mutation_keeps_tree_valid():
    store = SlowStore(delay=0.1)
    atree = AsyncNestedSetTree(NestedSetTree(store))

    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(atree.add_node("a"), timeout=0.05)
    await atree.add_node("b", "a")

    assert not store.overlapped
    assert await atree.get_parents("b") == ["root", "a"]
    assert await atree.validate() == []
