"""
diffgram
========

Difference of two whole snapshots (the "diffgram" of a report section).

:func:`diff_snapshots` runs :func:`configdiff.differ.diff_tables` over
every table of the hierarchy, sorts the results as the print layout asks,
re-links parent and child rows across the diff tables, and then annotates
every row in two passes:

1. bottom-up, pure: ``changed`` (the row or anything below it is not
   Unchanged) and ``row_span`` (how many physical HTML rows the row's
   cells must span)
2. top-down: ``can_hide`` (the row may be hidden by a "changes only" view)

The row writer only reads those annotations; it never walks the tree to
recompute them.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .differ import DiffRow, DiffTable, RowState, diff_tables
from .layout import PrintLayout
from .logging_config import child_context, get_context
from .model import Relation, Snapshot, check_same_schema

CAN_HIDE = "CanHide"


@dataclass
class DiffSnapshot:
    """The diffgram of one report section."""

    name: str
    tables: List[DiffTable] = field(default_factory=list)
    relations: Dict[int, Relation] = field(default_factory=dict)
    layout: PrintLayout = field(default_factory=PrintLayout)

    @property
    def root_rows(self) -> List[DiffRow]:
        return self.tables[0].rows if self.tables else []

    @property
    def can_hide(self) -> bool:
        """True if the whole section is unchanged and may be hidden."""
        return all(not row.changed for row in self.root_rows)

    def table(self, name: str) -> DiffTable:
        for t in self.tables:
            if t.name == name:
                return t
        raise KeyError(name)


# ---- sorting ----
def _sort_value(value: Any) -> Tuple[bool, Any]:
    # Nulls first, like the rest of the report tooling
    return (value is not None, value if value is not None else 0)


def sort_rows(rows: Sequence[DiffRow], sort_columns: Sequence[int]) -> List[DiffRow]:
    """Stable ascending sort of *rows* on *sort_columns* (in that order)."""
    if not sort_columns:
        return list(rows)
    return sorted(rows, key=lambda r: tuple(_sort_value(r.values[i]) for i in sort_columns))


# ---- relations ----
def link_rows(parent: DiffTable, child: DiffTable, relation: Relation, log=None) -> int:
    """Attach every row of *child* to its matching row(s) of *parent*.

    Child order follows the (already sorted) child table. A child with
    several matching parents appears under each; its ``parent`` is the
    first. Returns the number of orphan child rows.
    """
    index: Dict[Tuple[Any, ...], List[DiffRow]] = {}
    for row in parent.rows:
        index.setdefault(relation.parent_values(row.values), []).append(row)

    orphans = 0
    for row in child.rows:
        parents = index.get(relation.child_values(row.values), [])
        if not parents:
            orphans += 1
            continue
        row.parent = parents[0]
        for p in parents:
            p.children.append(row)

    if orphans:
        get_context(log, __name__).debug("Table '%s': %d row(s) without a parent in '%s'.", child.name, orphans, parent.name)
    return orphans


# ---- annotations ----
def is_cumulative_row_state_changed(row: DiffRow) -> bool:
    """True if *row* or any row below it is not Unchanged."""
    if row.state is not RowState.UNCHANGED:
        return True
    return any(is_cumulative_row_state_changed(child) for child in row.children)


def extra_row_count(row: DiffRow) -> int:
    """Physical rows consumed by *row*'s subtree beyond the row's own one."""
    count = 0
    for i, child in enumerate(row.children):
        if i > 0:
            count += 1
        count += extra_row_count(child)
    return count


def annotate_changes(tables: Sequence[DiffTable], depth: Optional[int] = None) -> None:
    """Bottom-up pass setting ``changed`` and ``row_span`` on every row.

    Only the first *depth* levels are rendered, so rows on the last rendered
    level span one physical row whatever lies below them.
    """
    for level in reversed(range(len(tables))):
        for row in tables[level].rows:
            row.changed = row.state is not RowState.UNCHANGED or any(c.changed for c in row.children)
            if depth is not None and level + 1 >= depth:
                row.row_span = 1
                continue
            extra = 0
            for i, child in enumerate(row.children):
                extra += (1 if i > 0 else 0) + (child.row_span - 1)
            row.row_span = extra + 1


def annotate_visibility(tables: Sequence[DiffTable], log=None) -> None:
    """Top-down pass setting ``can_hide`` on every row.

    Root rows can be hidden when their whole subtree is unchanged. A deeper
    unchanged row takes its parent's flag, so the unchanged rows under a
    changed ancestor stay visible with it.
    """
    log = get_context(log, __name__)
    for level, table in enumerate(tables):
        for row in table.rows:
            if row.changed:
                row.can_hide = False
            elif level == 0:
                row.can_hide = True
            elif row.parent is not None:
                row.can_hide = row.parent.can_hide
            else:
                log.error("Table '%s': no parent row. Data Row: %s", table.name, "|".join(map(str, row.values)))
                row.can_hide = False


def diff_snapshots(pilot: Snapshot, production: Snapshot, log=None) -> DiffSnapshot:
    """Return the diffgram of *pilot* against *production*.

    Parameters
    ----------
    pilot, production:
        Snapshots with identical schema. The pilot's print layout is used.
    log:
        Optional logger adapter; the section name is added to its context.

    Raises
    ------
    ValueError
        If either snapshot is None.
    SchemaMismatchError
        If the schemas differ.
    LayoutError
        If the print layout references missing tables or columns.
    """
    if pilot is None:
        raise ValueError("pilot snapshot is required")
    if production is None:
        raise ValueError("production snapshot is required")

    log = child_context(log, __name__, section=pilot.name)
    log.info("Processing changes for section '%s'.", pilot.name)

    check_same_schema(pilot, production)
    layout = pilot.layout
    layout.validate(pilot)

    diffgram = DiffSnapshot(pilot.name, relations=dict(pilot.relations), layout=copy.deepcopy(layout))

    for i, (p, q) in enumerate(zip(pilot.tables, production.tables)):
        table_log = log.child(table=p.name, level_index=i)
        diff = diff_tables(p, q, layout.ignored_columns(i), log=table_log)
        diff.rows = sort_rows(diff.rows, layout.sort_columns(i))
        diffgram.tables.append(diff)

    for level, relation in sorted(diffgram.relations.items()):
        link_rows(diffgram.tables[level], diffgram.tables[level + 1], relation, log=log)

    annotate_changes(diffgram.tables, layout.rendered_depth())
    annotate_visibility(diffgram.tables, log=log)

    if diffgram.can_hide:
        log.debug("Section '%s' has no changes.", pilot.name)
    return diffgram


def css_row_class(row: DiffRow) -> str:
    """CSS class of the ``<tr>`` for *row*."""
    if row.can_hide:
        return f"{row.state.value} {CAN_HIDE}"
    return row.state.value
