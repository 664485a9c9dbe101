"""
model
=====

In-memory relational snapshot of one report section.

A :class:`Snapshot` is a short, linear chain of :class:`Table` objects
(table ``i`` is the parent of table ``i + 1``), the :class:`Relation`
objects joining each adjacent pair by column values, and one
:class:`~configdiff.layout.PrintLayout`. Two snapshots with the same schema
are built per section, one for the pilot configuration and one for
production, then handed to :func:`configdiff.diffgram.diff_snapshots`.

Rows are plain value tuples in column order. Inserting a bad row never
raises: it is logged and dropped so that one broken configuration object
cannot blank out a whole report section.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .exceptions import SchemaMismatchError
from .layout import PrintLayout
from .logging_config import get_context

class ColumnType(Enum):
    """Declared value type of a column."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"

    def accepts(self, value: Any) -> bool:
        if value is None:
            return True
        if self is ColumnType.STRING:
            return isinstance(value, str)
        if self is ColumnType.INTEGER:
            return isinstance(value, int) and not isinstance(value, bool)
        return isinstance(value, bool)


@dataclass(frozen=True)
class Column:
    name: str
    type: ColumnType = ColumnType.STRING
    ordinal: int = 0


@dataclass(frozen=True)
class Row:
    """One table row.

    Attributes:
        values: Cell values in column order.
        vanity: True for a placeholder row inserted only so an empty table
            renders a "none configured" line. A vanity row is never shown
            as a deletion.
    """

    values: Tuple[Any, ...]
    vanity: bool = False

    def key(self, primary_key: Sequence[int]) -> Tuple[Any, ...]:
        return tuple(self.values[i] for i in primary_key)

    def __getitem__(self, index: int) -> Any:
        return self.values[index]


class Table:
    """A named table with typed columns and an ordered primary key.

    Parameters
    ----------
    name:
        Table name, unique within its snapshot.
    columns:
        Column names, ``(name, ColumnType)`` pairs or :class:`Column`
        objects. Ordinals are assigned from position.
    primary_key:
        Ordinals (or names) of the key columns, in comparison order.
    """

    def __init__(
        self,
        name: str,
        columns: Sequence[Union[str, Tuple[str, ColumnType], Column]],
        primary_key: Sequence[Union[int, str]] = (0,),
    ) -> None:
        self.name = name
        self.columns: List[Column] = []
        for ordinal, col in enumerate(columns):
            if isinstance(col, Column):
                self.columns.append(Column(col.name, col.type, ordinal))
            elif isinstance(col, tuple):
                self.columns.append(Column(col[0], col[1], ordinal))
            else:
                self.columns.append(Column(col, ColumnType.STRING, ordinal))
        self.primary_key: Tuple[int, ...] = tuple(self._ordinal(k) for k in primary_key)
        if not self.primary_key:
            raise ValueError(f"table {name!r} needs at least one primary key column")
        self.rows: List[Row] = []
        self._keys: Dict[Tuple[Any, ...], Row] = {}

    def _ordinal(self, ref: Union[int, str]) -> int:
        if isinstance(ref, int):
            if not 0 <= ref < len(self.columns):
                raise ValueError(f"table {self.name!r} has no column index {ref}")
            return ref
        for col in self.columns:
            if col.name == ref:
                return col.ordinal
        raise ValueError(f"table {self.name!r} has no column {ref!r}")

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def is_key(self, ordinal: int) -> bool:
        return ordinal in self.primary_key

    def add_row(self, row: Union[Sequence[Any], Row], vanity: bool = False, log=None) -> Optional[Row]:
        """Add a row; log and drop it if it violates the table's constraints.

        Parameters
        ----------
        row:
            Ordered values matching the column order, or a pre-built
            :class:`Row`.
        vanity:
            Mark the row as a placeholder (see :class:`Row`).
        log:
            Optional :class:`~configdiff.logging_config.LogContext`.

        Returns
        -------
        Row or None
            The stored row, or None if it was dropped.
        """
        if row is None:
            raise ValueError("row is required")

        if isinstance(row, Row):
            values = tuple(row.values)
            vanity = vanity or row.vanity
        else:
            values = tuple(row)

        error = self._validate(values)
        if error is not None:
            get_context(log, __name__).error(
                "%s Table: %s. Data Row: %s", error, self.name, "|".join("" if v is None else str(v) for v in values)
            )
            return None

        stored = Row(values, vanity)
        self.rows.append(stored)
        self._keys[stored.key(self.primary_key)] = stored
        return stored

    def _validate(self, values: Tuple[Any, ...]) -> Optional[str]:
        if len(values) != len(self.columns):
            return f"Expected {len(self.columns)} values, got {len(values)}."
        for col, value in zip(self.columns, values):
            if not col.type.accepts(value):
                return f"Column '{col.name}' expects {col.type.value}, got {type(value).__name__}."
        key = tuple(values[i] for i in self.primary_key)
        if any(v is None for v in key):
            return "Primary key column is null."
        if key in self._keys:
            return f"Duplicate primary key {key!r}."
        return None

    def find(self, key: Tuple[Any, ...]) -> Optional[Row]:
        """Return the row whose primary key equals *key*, if any."""
        return self._keys.get(tuple(key))

    def clone_schema(self) -> "Table":
        return Table(self.name, list(self.columns), self.primary_key)

    def schema(self) -> Tuple[str, Tuple[Tuple[str, ColumnType], ...], Tuple[int, ...]]:
        return self.name, tuple((c.name, c.type) for c in self.columns), self.primary_key

    def __len__(self) -> int:
        return len(self.rows)

    def __repr__(self) -> str:
        return f"Table({self.name!r}, columns={self.column_names!r}, rows={len(self.rows)})"


@dataclass(frozen=True)
class Relation:
    """Equi-join from table ``parent_level`` to table ``parent_level + 1``."""

    parent_level: int
    parent_columns: Tuple[int, ...]
    child_columns: Tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.parent_columns) != len(self.child_columns):
            raise ValueError("parent and child column lists must have the same length")
        if not self.parent_columns:
            raise ValueError("a relation needs at least one column pair")

    @property
    def child_level(self) -> int:
        return self.parent_level + 1

    def parent_values(self, values: Sequence[Any]) -> Tuple[Any, ...]:
        return tuple(values[i] for i in self.parent_columns)

    def child_values(self, values: Sequence[Any]) -> Tuple[Any, ...]:
        return tuple(values[i] for i in self.child_columns)


@dataclass
class Snapshot:
    """One environment's data for a report section.

    Attributes:
        name: Section name (used in logs).
        tables: The linear table hierarchy, root first.
        relations: One relation per adjacent table pair, keyed by parent level.
        layout: The print layout shared by both environments.
    """

    name: str
    tables: List[Table] = field(default_factory=list)
    relations: Dict[int, Relation] = field(default_factory=dict)
    layout: PrintLayout = field(default_factory=PrintLayout)

    def add_table(self, table: Table) -> Table:
        if any(t.name == table.name for t in self.tables):
            raise ValueError(f"snapshot {self.name!r} already has a table named {table.name!r}")
        self.tables.append(table)
        return table

    def relate(self, parent_level: int, parent_columns: Sequence[int], child_columns: Sequence[int]) -> Relation:
        """Declare the join between table *parent_level* and the next table."""
        if not 0 <= parent_level < len(self.tables) - 1:
            raise ValueError(f"no table pair at level {parent_level} in snapshot {self.name!r}")
        relation = Relation(parent_level, tuple(parent_columns), tuple(child_columns))
        parent, child = self.tables[parent_level], self.tables[parent_level + 1]
        for i in relation.parent_columns:
            parent._ordinal(i)
        for i in relation.child_columns:
            child._ordinal(i)
        self.relations[parent_level] = relation
        return relation

    def table(self, index_or_name: Union[int, str]) -> Table:
        if isinstance(index_or_name, int):
            return self.tables[index_or_name]
        for t in self.tables:
            if t.name == index_or_name:
                return t
        raise KeyError(index_or_name)

    def clone_schema(self, name: Optional[str] = None) -> "Snapshot":
        """Return an empty snapshot with this schema and a copy of the layout."""
        return Snapshot(
            name=name or self.name,
            tables=[t.clone_schema() for t in self.tables],
            relations=dict(self.relations),
            layout=copy.deepcopy(self.layout),
        )


def check_same_schema(pilot: Snapshot, production: Snapshot) -> None:
    """Raise :class:`SchemaMismatchError` unless both snapshots line up."""
    if len(pilot.tables) != len(production.tables):
        raise SchemaMismatchError(
            f"pilot has {len(pilot.tables)} table(s), production has {len(production.tables)}"
        )
    for p, q in zip(pilot.tables, production.tables):
        if p.schema() != q.schema():
            raise SchemaMismatchError("pilot and production table definitions differ", table=p.name)
    if pilot.relations != production.relations:
        raise SchemaMismatchError("pilot and production relations differ")
