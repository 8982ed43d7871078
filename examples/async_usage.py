#!/usr/bin/env python3
"""
Sharing one tree between asyncio tasks.

This example demonstrates:
- Opening a tree for async use
- Many concurrent writers, applied one at a time
- Validating the result
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from nestedsetlib.aio import open_tree_async


async def worker(atree, prefix: str, count: int):
    """Add a branch and fill it with leaves."""
    await atree.add_node(prefix)
    for i in range(count):
        await atree.add_node(f"{prefix}{i}", prefix)


async def main():
    async with await open_tree_async(backend="sql") as atree:
        await asyncio.gather(*(worker(atree, p, 10) for p in "abcde"))
        await atree.move_node("b", "a0")

        print(f"Nodes: {await atree.count()}")
        print(f"Parents of b3: {await atree.get_parents('b3')}")
        print(f"Violations: {await atree.validate()}")


if __name__ == "__main__":
    asyncio.run(main())
