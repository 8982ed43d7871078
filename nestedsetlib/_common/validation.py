"""Invariant checks for nested-set trees.

These functions are pure: they take a snapshot of nodes and return a list of
violation descriptions, empty when the tree is valid. They never touch a
store, so every realization is checked by the same code.
"""

from collections import Counter
from typing import Dict, List, Sequence

from .node import NestedSetNode


def find_violations(nodes: Sequence[NestedSetNode]) -> List[str]:
    """Check every nested-set invariant against a snapshot of nodes.

    Checks, in order:
    1. left < right for every node
    2. no bound value appears twice
    3. bounds form the contiguous numbering 1..2N
    4. every non-root node's parent is its tightest container
    5. depth equals the number of containing nodes

    Args:
        nodes: All nodes of the tree, in any order

    Returns:
        List of violation descriptions (empty if valid)
    """
    errors: List[str] = []
    if not nodes:
        return ["Tree has no nodes"]

    # 1. left < right
    for node in nodes:
        if node.left >= node.right:
            errors.append(
                f"Node {node.name} has invalid left/right values: ({node.left}, {node.right})"
            )

    # 2. uniqueness
    bounds = [b for node in nodes for b in (node.left, node.right)]
    duplicates = sorted(value for value, seen in Counter(bounds).items() if seen > 1)
    if duplicates:
        errors.append(f"Left/right values are not unique: {duplicates}")

    # 3. contiguous numbering
    expected_max = 2 * len(nodes)
    max_right = max(node.right for node in nodes)
    if max_right != expected_max:
        errors.append(
            f"Max right value {max_right} does not equal 2 * total nodes ({expected_max})"
        )
    if not duplicates and sorted(bounds) != list(range(1, expected_max + 1)):
        errors.append(f"Bounds do not form the sequence 1..{expected_max}")

    # 4. parent is the tightest container
    by_name: Dict[str, NestedSetNode] = {node.name: node for node in nodes}
    roots = [node.name for node in nodes if node.parent is None]
    if len(roots) != 1:
        errors.append(f"Expected exactly one root, found {len(roots)}: {roots}")

    for node in nodes:
        containers = [other for other in nodes if other.contains(node)]
        if node.parent is None:
            if containers:
                errors.append(f"Root {node.name} is nested within {containers[0].name}")
            continue
        parent = by_name.get(node.parent)
        if parent is None:
            errors.append(f"Parent {node.parent} not found for node {node.name}")
        elif not parent.contains(node):
            errors.append(f"Node {node.name} is not properly nested within parent {parent.name}")
        elif max(containers, key=lambda n: n.left).name != parent.name:
            tightest = max(containers, key=lambda n: n.left)
            errors.append(
                f"Node {node.name} is nested within {tightest.name}, not its parent {parent.name}"
            )

        # 5. depth
        if node.depth != len(containers):
            errors.append(
                f"Node {node.name} should have a depth of {len(containers)} not {node.depth}"
            )

    # Root depth is checked separately since the loop above skips it
    for name in roots:
        if by_name[name].depth != 0:
            errors.append(f"Root {name} should have a depth of 0 not {by_name[name].depth}")

    return errors
