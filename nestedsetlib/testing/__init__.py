"""Testing utilities for nestedsetlib consumers."""

from .fixtures import TreeTestHelper

__all__ = ['TreeTestHelper']
