"""Relational store for nestedsetlib.

Nodes live in one table accessed through SQLAlchemy Core, so any
SQLAlchemy-compatible database can back a tree. Range reads are indexed
queries on left/right/depth; bulk writes are single conditional UPDATE
statements. transaction() maps onto one database transaction.

Example:
    >>> store = SQLStore("sqlite:///tree.db")
    >>> tree = NestedSetTree(store)
    >>> tree.add_node("a")
    'Added a'
    >>> store.close()
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    delete,
    event,
    func,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

from ..._common.node import NestedSetNode
from ..core.store import BoundShift, NestedSetStore

logger = logging.getLogger(__name__)


def _create_tree_table(metadata: MetaData, table_name: str) -> Table:
    """Define the node table with its range-query indexes."""
    return Table(
        table_name,
        metadata,
        Column("name", String(255), primary_key=True),
        Column("parent", String(255), ForeignKey(f"{table_name}.name"), nullable=True),
        Column("depth", Integer, nullable=False),
        Column("left", Integer, nullable=False),
        Column("right", Integer, nullable=False),
        Index(f"{table_name}_depth", "depth"),
        Index(f"{table_name}_left", "left"),
        Index(f"{table_name}_right", "right"),
    )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_tree_engine(url: str = "sqlite://", echo: bool = False) -> Engine:
    """Create an engine suited to a tree store.

    In-memory SQLite needs StaticPool so every checkout sees the same
    database. SQLite connections get foreign key enforcement switched on.

    Args:
        url: SQLAlchemy connection URL
        echo: Log emitted SQL

    Returns:
        Configured Engine
    """
    if url.startswith("sqlite"):
        if url in ("sqlite://", "sqlite:///:memory:") or ":memory:" in url:
            engine = create_engine(
                url,
                echo=echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            engine = create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
            )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(url, echo=echo)


class SQLStore(NestedSetStore):
    """Table-backed store.

    Writes issued outside transaction() run in their own short transaction;
    writes inside it share one connection and commit together or not at all.
    """

    def __init__(self, url: str = "sqlite://", table_name: str = "tree",
                 echo: bool = False, reset: bool = False,
                 engine: Optional[Engine] = None):
        """Initialize the store and create its schema.

        Args:
            url: SQLAlchemy connection URL, ignored when engine is given
            table_name: Name of the node table
            echo: Log emitted SQL
            reset: Delete every existing row
            engine: Existing engine to use instead of creating one
        """
        self.url = str(engine.url) if engine is not None else url
        self._owns_engine = engine is None
        self._engine = engine if engine is not None else create_tree_engine(url, echo)
        self._metadata = MetaData()
        self.table = _create_tree_table(self._metadata, table_name)
        self._metadata.create_all(self._engine)
        self._conn: Optional[Connection] = None
        self._closed = False

        if reset:
            self.clear()

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def _connection(self) -> Iterator[Connection]:
        """Yield the open transaction's connection, or a fresh one."""
        if self._closed:
            raise RuntimeError("Store is closed")
        if self._conn is not None:
            yield self._conn
        else:
            with self._engine.begin() as conn:
                yield conn

    def _select_nodes(self, stmt) -> List[NestedSetNode]:
        with self._connection() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [NestedSetNode.from_mapping(row) for row in rows]

    # Reads

    def get(self, name: str) -> Optional[NestedSetNode]:
        t = self.table
        with self._connection() as conn:
            row = conn.execute(select(t).where(t.c.name == name)).mappings().first()
        return NestedSetNode.from_mapping(row) if row is not None else None

    def all(self) -> List[NestedSetNode]:
        return self._select_nodes(select(self.table).order_by(self.table.c.left))

    def descendants(self, node: NestedSetNode, max_depth: Optional[int] = None,
                    include_self: bool = False) -> List[NestedSetNode]:
        t = self.table
        if include_self:
            stmt = select(t).where(t.c.left >= node.left, t.c.right <= node.right)
        else:
            stmt = select(t).where(t.c.left > node.left, t.c.right < node.right)
        if max_depth is not None:
            stmt = stmt.where(t.c.depth <= node.depth + max_depth)
        return self._select_nodes(stmt.order_by(t.c.left))

    def ancestors(self, node: NestedSetNode) -> List[NestedSetNode]:
        t = self.table
        stmt = select(t).where(t.c.left < node.left, t.c.right > node.right)
        return self._select_nodes(stmt.order_by(t.c.left))

    def count(self) -> int:
        with self._connection() as conn:
            return conn.execute(select(func.count()).select_from(self.table)).scalar_one()

    # Writes

    def insert(self, node: NestedSetNode) -> None:
        with self._connection() as conn:
            conn.execute(insert(self.table).values(**node.to_dict()))

    def delete_range(self, left: int, right: int) -> int:
        t = self.table
        with self._connection() as conn:
            result = conn.execute(delete(t).where(t.c.left >= left, t.c.right <= right))
        return result.rowcount

    def shift_bounds(self, shift: BoundShift) -> int:
        if shift.is_empty():
            return 0
        t = self.table
        column = t.c[shift.column]
        stmt = update(t).values({column: column + shift.delta})
        if shift.minimum is not None:
            stmt = stmt.where(column >= shift.minimum)
        if shift.maximum is not None:
            stmt = stmt.where(column <= shift.maximum)
        with self._connection() as conn:
            result = conn.execute(stmt)
        return result.rowcount

    def set_parent_and_depth(self, name: str, parent: Optional[str],
                             depth: Optional[int] = None) -> None:
        t = self.table
        values = {"parent": parent}
        if depth is not None:
            values["depth"] = depth
        with self._connection() as conn:
            conn.execute(update(t).where(t.c.name == name).values(**values))

    def hide_range(self, left: int, right: int) -> int:
        t = self.table
        stmt = (
            update(t)
            .where(t.c.left >= left, t.c.right <= right)
            .values(left=-t.c.left, right=-t.c.right)
        )
        with self._connection() as conn:
            result = conn.execute(stmt)
        return result.rowcount

    def reveal_hidden(self, shift: int, delta_depth: int) -> int:
        t = self.table
        stmt = (
            update(t)
            .where(t.c.left < 0)
            .values(
                left=shift - t.c.left,
                right=shift - t.c.right,
                depth=t.c.depth + delta_depth,
            )
        )
        with self._connection() as conn:
            result = conn.execute(stmt)
        return result.rowcount

    def clear(self) -> None:
        with self._connection() as conn:
            conn.execute(delete(self.table))

    # Lifecycle

    @contextmanager
    def transaction(self) -> Iterator["SQLStore"]:
        if self._conn is not None:
            yield self
            return
        if self._closed:
            raise RuntimeError("Store is closed")
        with self._engine.begin() as conn:
            self._conn = conn
            try:
                yield self
            except BaseException as e:
                logger.warning("Rolling back %s transaction: %s", self.table.name, e)
                raise
            finally:
                self._conn = None

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_engine:
            self._engine.dispose()

    def is_persistent(self) -> bool:
        return ":memory:" not in self.url and self.url not in ("sqlite://",)

    def supports_transactions(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"SQLStore(url={self.url!r}, table={self.table.name!r})"
