"""
layout
======

Print layout for a report section.

The print layout is the side channel telling the differ and the row
writer, for every ``(table_index, column_index)`` pair:

- whether the column is rendered (``hidden``)
- its position in the table's sort key (``sort_order``, ``-1`` = unsorted)
- whether its changes are ignored when classifying rows (``change_ignored``)
- whether the cell is a bookmark anchor (``bookmark_index``) or a link to
  one (``jump_to_bookmark_index``); both point at another column of the
  same table whose value scopes the bookmark. ``-1`` = not used.

Pairs without a setting are treated as hidden.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from .exceptions import LayoutError


@dataclass(frozen=True)
class PrintSetting:
    """Print settings of one column."""

    table_index: int
    column_index: int
    hidden: bool = False
    sort_order: int = -1
    bookmark_index: int = -1
    jump_to_bookmark_index: int = -1
    change_ignored: bool = False

    @property
    def is_bookmark(self) -> bool:
        return self.bookmark_index != -1

    @property
    def is_jump_to_bookmark(self) -> bool:
        return self.jump_to_bookmark_index != -1


class PrintLayout:
    """Collection of :class:`PrintSetting` keyed by ``(table, column)``."""

    def __init__(self) -> None:
        self._settings: Dict[Tuple[int, int], PrintSetting] = {}

    def add(
        self,
        table_index: int,
        column_index: int,
        hidden: bool = False,
        sort_order: int = -1,
        bookmark_index: int = -1,
        jump_to_bookmark_index: int = -1,
        change_ignored: bool = False,
    ) -> PrintSetting:
        """Add the settings for one column.

        Raises
        ------
        LayoutError
            If the column already has settings.
        """
        key = (table_index, column_index)
        if key in self._settings:
            raise LayoutError("duplicate print setting", table_index, column_index)
        setting = PrintSetting(
            table_index,
            column_index,
            hidden,
            sort_order,
            bookmark_index,
            jump_to_bookmark_index,
            change_ignored,
        )
        self._settings[key] = setting
        return setting

    def get(self, table_index: int, column_index: int) -> Optional[PrintSetting]:
        return self._settings.get((table_index, column_index))

    def __iter__(self) -> Iterator[PrintSetting]:
        return iter(sorted(self._settings.values(), key=lambda s: (s.table_index, s.column_index)))

    def __len__(self) -> int:
        return len(self._settings)

    def visible_columns(self, table_index: int) -> List[int]:
        """Column ordinals rendered for *table_index*, in ordinal order."""
        return sorted(
            s.column_index for s in self._settings.values() if s.table_index == table_index and not s.hidden
        )

    def sort_columns(self, table_index: int) -> List[int]:
        """Column ordinals forming the sort key of *table_index*, by ``sort_order``."""
        sorted_settings = sorted(
            (s for s in self._settings.values() if s.table_index == table_index and s.sort_order != -1),
            key=lambda s: s.sort_order,
        )
        return [s.column_index for s in sorted_settings]

    def ignored_columns(self, table_index: int) -> List[int]:
        return sorted(
            s.column_index for s in self._settings.values() if s.table_index == table_index and s.change_ignored
        )

    def visible_cell_count(self) -> int:
        """Number of rendered cells in one fully populated output row."""
        return sum(1 for s in self._settings.values() if not s.hidden)

    def visible_cells_before(self, table_index: int) -> int:
        """Number of rendered cells belonging to tables above *table_index*."""
        return sum(1 for s in self._settings.values() if not s.hidden and s.table_index < table_index)

    def rendered_depth(self) -> int:
        """Number of table levels down to the deepest one with a visible column."""
        return max((s.table_index for s in self._settings.values() if not s.hidden), default=-1) + 1

    def bookmark_target(self, table_index: int, column_index: int) -> Optional[PrintSetting]:
        """Return the setting if the cell is a bookmark anchor or jump link."""
        setting = self.get(table_index, column_index)
        if setting is None or not (setting.is_bookmark or setting.is_jump_to_bookmark):
            return None
        return setting

    def validate(self, snapshot) -> None:
        """Check every setting against *snapshot*'s tables.

        Raises
        ------
        LayoutError
            If a setting names a table or column that does not exist, or a
            bookmark index points outside its table.
        """
        tables = snapshot.tables
        for s in self._settings.values():
            if not 0 <= s.table_index < len(tables):
                raise LayoutError("print setting references a missing table", s.table_index, s.column_index)
            width = len(tables[s.table_index].columns)
            if not 0 <= s.column_index < width:
                raise LayoutError("print setting references a missing column", s.table_index, s.column_index)
            for index in (s.bookmark_index, s.jump_to_bookmark_index):
                if index != -1 and not 0 <= index < width:
                    raise LayoutError("print setting references a missing column", s.table_index, index)
