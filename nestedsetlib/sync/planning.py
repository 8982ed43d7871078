"""Store planning for nestedsetlib.

The StorePlan validates that a TreeConfig can be satisfied and builds the
store it describes. Validation happens before any database is touched, so
a bad configuration fails with one ConfigurationError listing every problem.
"""

import logging
from typing import List, Optional

from .._common.config import StoreBackend, TreeConfig
from .._common.exceptions import ConfigurationError
from .core.store import NestedSetStore
from .core.tree import NestedSetTree
from .stores.memory import MemoryStore
from .stores.sql import SQLStore

logger = logging.getLogger(__name__)


class StorePlan:
    """Validated plan for opening a tree.

    The StorePlan is the bridge between user intent (TreeConfig) and a
    working NestedSetTree.
    """

    def __init__(self, config: Optional[TreeConfig] = None):
        """Create and validate a plan.

        Args:
            config: Tree configuration, defaults to TreeConfig()

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.config = config or TreeConfig()

        config_errors = self.config.validate()
        if config_errors:
            raise ConfigurationError(
                f"Invalid configuration: {'; '.join(config_errors)}"
            )

    def create_store(self) -> NestedSetStore:
        """Build the store selected by the configuration."""
        store_config = self.config.store
        if store_config.backend == StoreBackend.MEMORY:
            store: NestedSetStore = MemoryStore()
        elif store_config.backend == StoreBackend.SQL:
            store = SQLStore(
                url=store_config.url,
                table_name=store_config.table_name,
                echo=store_config.echo,
                reset=store_config.reset,
            )
        else:
            raise ConfigurationError(f"Unsupported store backend: {store_config.backend!r}")
        logger.debug("Created %r", store)
        return store

    def open_tree(self) -> NestedSetTree:
        """Build the store and open a tree over it."""
        return NestedSetTree(self.create_store(), self.config)

    def get_plan_summary(self) -> List[str]:
        """Get a readable summary of the plan, one line per setting."""
        store_config = self.config.store
        lines = [
            f"root: {self.config.root_name}",
            f"backend: {store_config.backend.value}",
        ]
        if store_config.backend == StoreBackend.SQL:
            lines.append(f"url: {store_config.url}")
            lines.append(f"table: {store_config.table_name}")
        lines.append(f"validate writes: {self.config.validate_writes}")
        return lines


def create_store(config: Optional[TreeConfig] = None) -> NestedSetStore:
    """Validate a configuration and build its store."""
    return StorePlan(config).create_store()
