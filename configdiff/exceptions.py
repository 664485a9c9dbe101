"""
exceptions
==========

Exception hierarchy for the diff-and-render engine.

Only caller bugs are raised: a pilot/production schema that does not line
up, or a print layout that points at columns that do not exist. Bad data
rows are never raised; :meth:`configdiff.model.Table.add_row` logs and
drops them instead.
"""

from __future__ import annotations

from typing import Optional


class ConfigDiffError(Exception):
    """Base class for all errors raised by :mod:`configdiff`."""


class SchemaMismatchError(ConfigDiffError):
    """Raised when the pilot and production snapshots do not share a schema.

    Args:
        message: What differs.
        table: Optional name of the table where the mismatch was found.
    """

    def __init__(self, message: str, table: Optional[str] = None) -> None:
        self.table = table
        if table is not None:
            message = f"{message} (table={table})"
        super().__init__(message)


class LayoutError(ConfigDiffError):
    """Raised when a print layout is inconsistent with itself or its snapshot."""

    def __init__(self, message: str, table_index: Optional[int] = None, column_index: Optional[int] = None) -> None:
        self.table_index = table_index
        self.column_index = column_index
        if table_index is not None:
            message = f"{message} (table_index={table_index}, column_index={column_index})"
        super().__init__(message)
