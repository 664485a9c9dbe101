"""
writer
======

Hierarchical HTML row writer.

Walks the table hierarchy of a :class:`~configdiff.diffgram.DiffSnapshot`
and writes master/detail table rows: a parent row and its first child share
one physical ``<tr>``, and the parent's cells span every physical row used
by its subtree (``rowspan`` comes precomputed from the diffgram).

Markup contract consumed by the report stylesheet/script:

- every ``<tr>`` and ``<td>`` carries the row state (``Unchanged``,
  ``Modified``, ``Added``, ``Deleted``) as CSS class
- rows that a "changes only" view may hide also carry ``CanHide``
- a modified cell shows ``<span class="Deleted">old</span>`` followed by
  ``<span class="Modified">new</span>``
"""

from __future__ import annotations

import html
from typing import Any, Optional, Sequence, TextIO

from .bookmarks import write_bookmark_location, write_jump_to_bookmark_location
from .diffgram import DiffSnapshot, css_row_class
from .differ import DiffRow, RowState
from .layout import PrintSetting
from .logging_config import get_context


def cell_text(value: Any) -> str:
    """Render a cell value the way the report shows it."""
    if value is None:
        return ""
    return str(value)


class RowWriter:
    """Write the rows of one diffgram to *out*.

    Parameters
    ----------
    out:
        Text sink for the HTML fragment.
    diffgram:
        The annotated diff snapshot whose rows are written.
    placeholder:
        Text of the filler cells completing a row with no children.
    log:
        Optional :class:`~configdiff.logging_config.LogContext`.
    """

    def __init__(self, out: TextIO, diffgram: DiffSnapshot, placeholder: str = "-", log=None) -> None:
        if out is None:
            raise ValueError("out is required")
        if diffgram is None:
            raise ValueError("diffgram is required")
        self.out = out
        self.diffgram = diffgram
        self.layout = diffgram.layout
        self.placeholder = placeholder
        self.log = get_context(log, __name__)
        self.max_cell_count = self.layout.visible_cell_count()

    def write_table_rows(self) -> None:
        """Write every row of the diffgram, starting at the root table."""
        self.write_rows(self.diffgram.root_rows)

    def write_rows(self, rows: Optional[Sequence[DiffRow]], table_index: int = 0, cell_index: int = 0) -> int:
        """Write *rows* of table level *table_index* and their descendants.

        Parameters
        ----------
        rows:
            Rows of one table level. An empty sequence writes nothing.
        table_index:
            Level of *rows* in the hierarchy.
        cell_index:
            Cells already written into the currently open ``<tr>``; 0 means
            no row is open.

        Returns
        -------
        int
            The cell index to carry on with (0 once the row is closed).

        Raises
        ------
        ValueError
            If *rows* is None.
        """
        if rows is None:
            raise ValueError("rows is required")
        if not rows:
            return cell_index

        self.log.debug("Writing %d row(s) at table index %d, cell index %d.", len(rows), table_index, cell_index)

        columns = self.layout.visible_columns(table_index)
        cells_before = self.layout.visible_cells_before(table_index)
        # levels below the rendered depth have no cells
        descend = table_index + 1 < self.layout.rendered_depth()

        for row in rows:
            css_class = row.state.value

            if cell_index == 0:
                self.out.write(f'<tr class="{css_row_class(row)}">')

            has_children = bool(row.children) and descend

            cell_index = cells_before
            for column in columns:
                self.write_cell(row, column, row.row_span, table_index)
                cell_index += 1

            if not has_children:
                # complete the row with filler cells
                while cell_index < self.max_cell_count:
                    self.out.write(f'<td class="{css_class}" rowspan="1">{html.escape(self.placeholder)}</td>')
                    cell_index += 1
                self.out.write("</tr>\n")
                cell_index = 0
            else:
                cell_index = self.write_rows(row.children, table_index + 1, cell_index)

        return cell_index

    def write_cell(self, row: DiffRow, column: int, row_span: int, table_index: int) -> None:
        """Write the ``<td>`` for *column* of *row*."""
        if row is None:
            raise ValueError("row is required")

        table = self.diffgram.tables[table_index]
        setting = self.layout.bookmark_target(table_index, column)
        css_class = row.state.value

        self.out.write(f'<td class="{css_class}" rowspan="{row_span}">')

        if table.is_key(column):
            self.write_cell_text(cell_text(row[column]), setting, row, css_class)
        elif row.state is RowState.MODIFIED:
            old_text = cell_text(row.old(column))
            text = cell_text(row[column])
            if old_text != text:
                deleted = RowState.DELETED.value
                self.out.write(f'<span class="{deleted}">')
                self.write_cell_text(old_text, setting, row, deleted)
                self.out.write("</span>")
                self.out.write(f'<span class="{RowState.MODIFIED.value}">')
                self.write_cell_text(text, setting, row, css_class)
                self.out.write("</span>")
            else:
                self.write_cell_text(text, setting, row, css_class)
        elif row.state is RowState.DELETED:
            deleted = RowState.DELETED.value
            self.write_cell_text(cell_text(row.old(column)), setting, row, deleted)
        else:
            self.write_cell_text(cell_text(row[column]), setting, row, css_class)

        self.out.write("</td>")

    def write_cell_text(self, text: str, setting: Optional[PrintSetting], row: DiffRow, css_class: str) -> None:
        """Write *text* as plain text, a bookmark anchor or a jump link.

        The value of the setting's bookmark / jump column scopes the
        bookmark; *text* is the bookmark text.
        """
        if row is None:
            return

        if setting is not None and setting.is_bookmark:
            section_id = cell_text(row[setting.bookmark_index])
            write_bookmark_location(self.out, text, section_id, css_class)
        elif setting is not None and setting.is_jump_to_bookmark:
            target = cell_text(row[setting.jump_to_bookmark_index])
            if target:
                write_jump_to_bookmark_location(self.out, text, target, css_class)
            else:
                self.out.write(html.escape(text))
        else:
            self.out.write(html.escape(text))
