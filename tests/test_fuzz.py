"""Random move stress tests.

Long runs of random relocations over the reference forest must keep every
invariant. The SQL run is marked slow.
"""

import random
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from nestedsetlib import InvariantViolationError, NoLegalMoveError
from nestedsetlib.sync import (
    MemoryStore,
    NestedSetTree,
    SQLStore,
    TreeConfig,
    build_tree,
    fuzz_moves,
)
from nestedsetlib.testing import TreeTestHelper


class FirstChoice(random.Random):
    """Random source that always picks the first candidate."""

    def choice(self, seq):
        return seq[0]


def seeded_forest(seed=None, store=None, **options):
    config = TreeConfig(seed=seed, **options)
    return build_tree(NestedSetTree(store or MemoryStore(), config))


def test_thousand_random_moves_stay_valid():
    tree = seeded_forest(seed=1)
    moves = fuzz_moves(tree, 1000)

    assert len(moves) == 1000
    summary = TreeTestHelper(tree).get_summary()
    assert summary['total_nodes'] == 16
    assert summary['max_right'] == 32
    assert summary['depth_law']
    assert tree.get_node("root").left == 1


@pytest.mark.slow
def test_thousand_random_moves_on_sql():
    store = SQLStore("sqlite://")
    tree = seeded_forest(seed=2, store=store)
    try:
        fuzz_moves(tree, 1000, validate_every=10)
        assert tree.validate() == []
    finally:
        store.close()


def test_sql_random_moves_stay_valid():
    store = SQLStore("sqlite://")
    tree = seeded_forest(seed=3, store=store)
    try:
        fuzz_moves(tree, 100)
        assert tree.validate() == []
    finally:
        store.close()


def test_moves_are_recorded():
    tree = seeded_forest(seed=4)
    moves = fuzz_moves(tree, 20)
    assert list(tree.history)[-20:] == moves
    assert all(m.operation == "move" for m in moves)


def test_same_seed_same_moves():
    first = seeded_forest(seed=42)
    second = seeded_forest(seed=42)

    assert fuzz_moves(first, 50) == fuzz_moves(second, 50)
    TreeTestHelper(first).assert_same_shape(second)


def test_explicit_rng_overrides_seed():
    first = seeded_forest(seed=1)
    second = seeded_forest(seed=2)

    moves = fuzz_moves(first, 30, rng=random.Random(9))
    assert fuzz_moves(second, 30, rng=random.Random(9)) == moves


def test_move_random_node_returns_pair():
    tree = seeded_forest(seed=5)
    name, destination = tree.move_random_node()
    assert name != tree.root_name
    assert tree.get_node(name).parent == destination


@pytest.mark.parametrize("edges", [[], [("a", None)]])
def test_too_small_tree_has_no_moves(edges):
    tree = build_tree(NestedSetTree(MemoryStore()), edges)
    with pytest.raises(NoLegalMoveError):
        tree.move_random_node()


def test_gives_up_after_max_attempts():
    tree = seeded_forest(max_move_attempts=5)
    before = TreeTestHelper(tree).snapshot()

    with pytest.raises(NoLegalMoveError) as exc_info:
        tree.move_random_node(FirstChoice())
    assert "5 attempts" in str(exc_info.value)
    assert TreeTestHelper(tree).snapshot() == before


def test_fuzz_stops_at_first_violation():
    store = MemoryStore()
    tree = seeded_forest(seed=6, store=store)
    original = store.reveal_hidden
    store.reveal_hidden = lambda shift, delta_depth: original(shift + 1, delta_depth)

    with pytest.raises(InvariantViolationError) as exc_info:
        fuzz_moves(tree, 100)
    assert len(exc_info.value.history) == 1
    assert exc_info.value.violations


def test_validate_every_must_be_positive():
    with pytest.raises(ValueError):
        fuzz_moves(seeded_forest(), 10, validate_every=0)
