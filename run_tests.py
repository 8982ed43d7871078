#!/usr/bin/env python
"""
Test runner for nestedsetlib.

Usage:
    python run_tests.py           # Run all non-slow tests
    python run_tests.py --all     # Include slow tests (long SQL fuzz runs)
"""

import argparse
import subprocess
import sys
from pathlib import Path


def run_tests(include_slow=False):
    """Run the test suite."""
    cmd = [sys.executable, "-m", "pytest", "tests", "--tb=short", "-v"]
    if not include_slow:
        cmd.extend(["-m", "not slow"])

    result = subprocess.run(cmd, cwd=Path(__file__).parent)
    return result.returncode


def main():
    parser = argparse.ArgumentParser(description="Test runner for nestedsetlib")
    parser.add_argument("--all", action="store_true", help="Run all tests including slow ones")
    args = parser.parse_args()
    return run_tests(include_slow=args.all)


if __name__ == "__main__":
    sys.exit(main())
