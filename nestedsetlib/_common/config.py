"""Configuration system for nestedsetlib.

This module defines how users specify which store backs a tree and how the
engine behaves around it: root naming, random move sampling, mutation history
and write validation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class StoreBackend(Enum):
    """Which store realization holds the nodes."""
    MEMORY = "memory"   # In-process dict of nodes
    SQL = "sql"         # Table-backed via SQLAlchemy


@dataclass
class StoreConfig:
    """Configuration for the node store."""

    backend: StoreBackend = StoreBackend.MEMORY
    url: str = "sqlite://"          # SQLAlchemy URL, SQL backend only
    table_name: str = "tree"
    echo: bool = False              # Log emitted SQL
    reset: bool = False             # Drop existing rows when opening

    def validate(self) -> List[str]:
        """Validate store configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if not isinstance(self.backend, StoreBackend):
            errors.append(f"unknown store backend: {self.backend!r}")
        if self.backend == StoreBackend.SQL:
            if not self.url:
                errors.append("url is required for the sql backend")
            if not self.table_name or not self.table_name.isidentifier():
                errors.append(f"invalid table name: {self.table_name!r}")
        return errors


@dataclass
class TreeConfig:
    """Complete configuration for a nested-set tree.

    This is the primary way users choose a backend and tune the engine.
    planning.create_store() validates it before any store is built.
    """

    root_name: str = "root"
    store: StoreConfig = field(default_factory=StoreConfig)

    # Random move sampling
    max_move_attempts: int = 1000
    seed: Optional[int] = None

    # Mutation bookkeeping
    history_limit: Optional[int] = 1000   # None keeps everything
    validate_writes: bool = False          # Validate inside every write transaction

    @classmethod
    def in_memory(cls, root_name: str = "root") -> 'TreeConfig':
        """Create config for a process-local tree."""
        return cls(root_name=root_name, store=StoreConfig(backend=StoreBackend.MEMORY))

    @classmethod
    def sqlite(cls, path: Optional[str] = None, reset: bool = False) -> 'TreeConfig':
        """Create config for a SQLite-backed tree.

        Args:
            path: Database file, or None for a private in-memory database
            reset: Clear existing rows when the tree is opened

        Returns:
            TreeConfig using the sql backend
        """
        url = f"sqlite:///{path}" if path else "sqlite://"
        return cls(store=StoreConfig(backend=StoreBackend.SQL, url=url, reset=reset))

    @classmethod
    def paranoid(cls, backend: StoreBackend = StoreBackend.MEMORY) -> 'TreeConfig':
        """Create config that validates the whole tree on every write."""
        return cls(
            store=StoreConfig(backend=backend),
            history_limit=None,
            validate_writes=True,
        )

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not self.root_name:
            errors.append("root_name cannot be empty")

        if self.max_move_attempts <= 0:
            errors.append("max_move_attempts must be positive")

        if self.history_limit is not None and self.history_limit < 0:
            errors.append("history_limit cannot be negative")

        errors.extend(self.store.validate())
        return errors
