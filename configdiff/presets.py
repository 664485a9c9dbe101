"""
presets
=======

Ready-made snapshot pairs for the two most common section shapes:

- *simple settings*: one flat table of ``Column1 .. ColumnN`` strings, one
  key column, every column shown and sorted by the key
- *simple ordered settings*: like simple settings, but column 1 is a hidden
  display-order column the rows are sorted by

Each builder returns an empty ``(pilot, production)`` pair with identical
schema and layout, ready for rows.
"""

from __future__ import annotations

from typing import List, Tuple

from .model import ColumnType, Snapshot, Table

SIMPLE_SETTINGS = "SimpleSettings"
SIMPLE_ORDERED_SETTINGS = "SimpleOrderedSettings"


def _column_names(column_count: int) -> List[str]:
    return [f"Column{i + 1}" for i in range(column_count)]


def simple_settings_snapshots(column_count: int, key_index: int = 0) -> Tuple[Snapshot, Snapshot]:
    """Return an empty pilot/production pair for a simple settings table.

    Parameters
    ----------
    column_count:
        Number of string columns.
    key_index:
        Ordinal of the primary key column, which is also the sort column.
    """
    if column_count < 1:
        raise ValueError("column_count must be at least 1")
    if not 0 <= key_index < column_count:
        raise ValueError(f"key_index {key_index} is outside 0..{column_count - 1}")

    pilot = Snapshot(SIMPLE_SETTINGS)
    pilot.add_table(Table(SIMPLE_SETTINGS, _column_names(column_count), primary_key=(key_index,)))
    for i in range(column_count):
        pilot.layout.add(0, i, sort_order=0 if i == key_index else -1)

    return pilot, pilot.clone_schema()


def simple_ordered_settings_snapshots(
    column_count: int, key_count: int = 2, alphabetic_order: bool = False
) -> Tuple[Snapshot, Snapshot]:
    """Return an empty pilot/production pair for a simple ordered settings table.

    ``Column1`` holds the display order: an integer, or a string when
    *alphabetic_order* is set. It is hidden and is the only sort column.
    The primary key is the first *key_count* columns.
    """
    if column_count < 2:
        raise ValueError("column_count must be at least 2")
    if not 1 <= key_count <= column_count:
        raise ValueError(f"key_count {key_count} is outside 1..{column_count}")

    order_type = ColumnType.STRING if alphabetic_order else ColumnType.INTEGER
    names = _column_names(column_count)
    columns = [(names[0], order_type)] + [(name, ColumnType.STRING) for name in names[1:]]

    pilot = Snapshot(SIMPLE_ORDERED_SETTINGS)
    pilot.add_table(Table(SIMPLE_ORDERED_SETTINGS, columns, primary_key=tuple(range(key_count))))
    for i in range(column_count):
        pilot.layout.add(0, i, hidden=(i == 0), sort_order=0 if i == 0 else -1)

    return pilot, pilot.clone_schema()
