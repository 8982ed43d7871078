#!/usr/bin/env python3
"""
Random move stress run.

Moves random subtrees of the reference forest around and validates the
whole tree after each move. On failure, prints the violations and the
moves that led to them.

Usage:
    python examples/fuzz_moves.py --iterations 5000 --seed 3
    python examples/fuzz_moves.py --backend sql --db tree.db
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from nestedsetlib import InvariantViolationError
from nestedsetlib.sync import build_tree, fuzz_moves, open_tree


def main():
    parser = argparse.ArgumentParser(description="Fuzz nested-set subtree moves")
    parser.add_argument("--iterations", type=int, default=1000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--backend", choices=["memory", "sql"], default="memory")
    parser.add_argument("--db", help="SQLite file for the sql backend (default: in memory)")
    parser.add_argument("--validate-every", type=int, default=1)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    options = {"seed": args.seed}
    if args.db:
        options.update(url=f"sqlite:///{args.db}", reset=True)
    tree = build_tree(open_tree(backend=args.backend, **options))

    start = time.perf_counter()
    try:
        moves = fuzz_moves(tree, args.iterations, validate_every=args.validate_every)
    except InvariantViolationError as e:
        print(e)
        for move in e.history[-10:]:
            print(f"  {move}")
        return 1
    finally:
        tree.store.close()

    elapsed = time.perf_counter() - start
    print(f"{len(moves)} moves in {elapsed:.2f}s, tree valid")
    return 0


if __name__ == "__main__":
    sys.exit(main())
