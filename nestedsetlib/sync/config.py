"""Configuration re-export for the sync package.

Re-exports configuration components from the _common package so sync
users have a single import location.
"""

from .._common.config import (
    StoreBackend,
    StoreConfig,
    TreeConfig,
)

__all__ = [
    'StoreBackend',
    'StoreConfig',
    'TreeConfig',
]
