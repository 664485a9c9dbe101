"""
differ
======

Row-level and cell-level difference of two tables with the same schema.

Every pilot row is matched to the production row with the same primary key
and classified:

- ``Unchanged``: key match, all compared columns equal
- ``Modified``: key match, at least one compared column differs
- ``Added``: no production row with that key
- ``Deleted``: a production row with no pilot row of that key

Columns listed as ignored take no part in the comparison, so that
presentation-only columns (an arrow glyph, an internal rank) cannot turn a
row into ``Modified`` on their own.

Primary keys are unique within a :class:`~configdiff.model.Table` (the
table rejects duplicates on insert), so "first match" and "only match"
coincide.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .exceptions import SchemaMismatchError
from .logging_config import get_context
from .model import Column, Table


class RowState(str, Enum):
    """Diff classification of a row. The value doubles as its CSS class."""

    UNCHANGED = "Unchanged"
    MODIFIED = "Modified"
    ADDED = "Added"
    DELETED = "Deleted"

    def __str__(self) -> str:
        return self.value


@dataclass(eq=False)
class DiffRow:
    """One row of a diff table.

    ``values`` always holds something renderable: the pilot values for
    Unchanged/Modified/Added rows and the production values for Deleted
    rows. ``old_values`` holds the production values of Modified and
    Deleted rows and is None otherwise.

    The remaining fields are filled in by :func:`configdiff.diffgram.diff_snapshots`.
    """

    state: RowState
    values: Tuple[Any, ...]
    old_values: Optional[Tuple[Any, ...]] = None
    children: List["DiffRow"] = field(default_factory=list, repr=False)
    parent: Optional["DiffRow"] = field(default=None, repr=False)
    changed: bool = False
    can_hide: bool = False
    row_span: int = 1

    @classmethod
    def unchanged(cls, values: Sequence[Any]) -> "DiffRow":
        return cls(RowState.UNCHANGED, tuple(values))

    @classmethod
    def modified(cls, values: Sequence[Any], old_values: Sequence[Any]) -> "DiffRow":
        return cls(RowState.MODIFIED, tuple(values), tuple(old_values))

    @classmethod
    def added(cls, values: Sequence[Any]) -> "DiffRow":
        return cls(RowState.ADDED, tuple(values))

    @classmethod
    def deleted(cls, old_values: Sequence[Any]) -> "DiffRow":
        old = tuple(old_values)
        return cls(RowState.DELETED, old, old)

    def __getitem__(self, index: int) -> Any:
        return self.values[index]

    def old(self, index: int) -> Any:
        """Prior (production) value of column *index*, or None if the row has none."""
        if self.old_values is None:
            return None
        return self.old_values[index]


@dataclass
class DiffTable:
    """Diff of one table: the source schema plus tagged rows."""

    name: str
    columns: List[Column]
    primary_key: Tuple[int, ...]
    rows: List[DiffRow] = field(default_factory=list)

    def is_key(self, ordinal: int) -> bool:
        return ordinal in self.primary_key

    def __len__(self) -> int:
        return len(self.rows)


def _compared(values: Sequence[Any], ignored: frozenset) -> Tuple[Any, ...]:
    return tuple(v for i, v in enumerate(values) if i not in ignored)


def diff_tables(pilot: Table, production: Table, ignored_columns: Iterable[int] = (), log=None) -> DiffTable:
    """Return the diff table of *pilot* against *production*.

    Parameters
    ----------
    pilot, production:
        Tables with identical schema and primary key.
    ignored_columns:
        Column ordinals excluded from the Unchanged/Modified comparison.
    log:
        Optional :class:`~configdiff.logging_config.LogContext`.

    Returns
    -------
    DiffTable
        Rows in the order unchanged, modified, added, deleted. A vanity
        production row that would be reported as deleted is left out.

    Raises
    ------
    ValueError
        If either table is None.
    SchemaMismatchError
        If the two tables do not share a schema.
    """
    if pilot is None:
        raise ValueError("pilot table is required")
    if production is None:
        raise ValueError("production table is required")
    if pilot.schema() != production.schema():
        raise SchemaMismatchError("pilot and production table definitions differ", table=pilot.name)

    log = get_context(log, __name__)
    log.debug("Diffing table '%s': %d pilot row(s), %d production row(s).", pilot.name, len(pilot), len(production))

    ignored = frozenset(ignored_columns)
    key = pilot.primary_key

    unchanged: List[DiffRow] = []
    modified: List[DiffRow] = []
    added: List[DiffRow] = []
    deleted: List[DiffRow] = []

    for row in pilot.rows:
        match = production.find(row.key(key))
        if match is None:
            added.append(DiffRow.added(row.values))
        elif _compared(row.values, ignored) == _compared(match.values, ignored):
            unchanged.append(DiffRow.unchanged(row.values))
        else:
            modified.append(DiffRow.modified(row.values, match.values))

    for row in production.rows:
        if pilot.find(row.key(key)) is not None:
            continue
        if row.vanity:
            log.debug("Skipping vanity row in deleted set of table '%s'.", production.name)
            continue
        deleted.append(DiffRow.deleted(row.values))

    diff = DiffTable(pilot.name, list(pilot.columns), key)
    diff.rows.extend(unchanged)
    diff.rows.extend(modified)
    diff.rows.extend(added)
    diff.rows.extend(deleted)

    log.debug(
        "Table '%s': %d unchanged, %d modified, %d added, %d deleted.",
        pilot.name,
        len(unchanged),
        len(modified),
        len(added),
        len(deleted),
    )
    return diff
