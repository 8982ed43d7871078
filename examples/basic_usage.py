#!/usr/bin/env python3
"""
Basic usage of nestedsetlib.

This example demonstrates:
- Opening a tree over a SQLite file
- Adding, moving and removing subtrees
- Range queries for descendants and ancestors
"""

import json
import logging
import sys
import tempfile
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from nestedsetlib import CycleViolationError
from nestedsetlib.sync import TreeConfig, build_tree, get_tree_stats, open_tree, to_nested


def main():
    """Build the reference forest in a database file and reshape it."""
    logging.basicConfig(level=logging.DEBUG if "-v" in sys.argv else logging.INFO)

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "tree.db"
        tree = build_tree(open_tree(TreeConfig.sqlite(str(path))))

        print(f"Opened {tree!r}")
        print("-" * 50)
        print(f"Children of a: {tree.get_children('a')}")
        print(f"Parents of bbbb: {tree.get_parents('bbbb')}")

        print(tree.move_node("ba", "c"))
        print(f"Parents of bbbb: {tree.get_parents('bbbb')}")

        try:
            tree.move_node("c", "bbbb")
        except CycleViolationError as e:
            print(f"Rejected: {e}")

        print(tree.remove_node("aa"))
        print(json.dumps(to_nested(tree, "c"), indent=2))

        stats = get_tree_stats(tree)
        print(f"\n{stats['total_nodes']} nodes, max depth {stats['max_depth']}, "
              f"valid: {tree.is_valid()}")
        tree.store.close()


if __name__ == "__main__":
    main()
