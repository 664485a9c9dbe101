"""
report
======

Report assembly around the diff engine.

:class:`ReportBuilder` is what every configuration-section printer builds
on. It keeps two buffers, the report body and the table of contents, and
offers the building blocks a section printer needs:

- section headers with a matching ToC entry and bookmark
- tables with a header (``colgroup`` + ``thead``) and diffgram rows
- paragraphs and line breaks

:meth:`ReportBuilder.write_report` wraps the collected fragments into a
complete HTML page with the "Only Show Changes" toggle and a legend.

Primary API
-----------
- :class:`ReportBuilder`
- :class:`HeaderCell`, :func:`simple_settings_header`
"""

from __future__ import annotations

import datetime as dt
import html
import io
from dataclasses import dataclass
from enum import Enum
from importlib import metadata
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Tuple

from .bookmarks import bookmark_location, jump_to_bookmark_location
from .diffgram import CAN_HIDE, DiffSnapshot, diff_snapshots
from .differ import RowState
from .logging_config import get_context
from .model import Snapshot
from .settings import ReportSettings
from .utils import write_text
from .writer import RowWriter


class ConfigEnvironment(Enum):
    """Whether a configuration object exists in pilot, production or both."""

    PILOT_AND_PRODUCTION = 0
    PILOT_ONLY = 1
    PRODUCTION_ONLY = 2


class HtmlTableSize(Enum):
    """Width class of an HTML table (the stylesheet maps these to 50/75/95%)."""

    STANDARD = "Standard"
    LARGE = "Large"
    HUGE = "Huge"


@dataclass(frozen=True)
class HeaderCell:
    """One ``<th>`` of a table header.

    ``col_width`` is a percentage; leave it 0 for a cell spanning columns
    whose widths are given on the next header row.
    """

    row_index: int
    column_index: int
    name: str
    row_span: int = 1
    col_span: int = 1
    col_width: int = 0


def simple_settings_header(column_names: Mapping[str, int], title: Optional[str] = None) -> List[HeaderCell]:
    """Header for a simple settings table.

    Parameters
    ----------
    column_names:
        Ordered ``{column name: width percent}``.
    title:
        Optional first header row spanning all columns.
    """
    cells: List[HeaderCell] = []
    names = list(column_names.items())
    if title and names:
        cells.append(HeaderCell(0, 0, title, 1, len(names)))
        for i, (name, width) in enumerate(names):
            cells.append(HeaderCell(1, i, name, 1, 1, width))
    elif names:
        for i, (name, width) in enumerate(names):
            cells.append(HeaderCell(0, i, name, 1, 1, width))
    elif title:
        cells.append(HeaderCell(0, 0, title, 1, 2))
    return cells


def documenter_version() -> str:
    try:
        return metadata.version("configdiff")
    except metadata.PackageNotFoundError:
        return "0.0.0"


class ReportBuilder:
    """Accumulates the HTML of a report and its table of contents.

    Parameters
    ----------
    settings:
        Rendering options; defaults to :class:`ReportSettings` defaults.
    environment:
        Where the configuration object being documented exists. Drives the
        CSS class of ToC anchors.
    log:
        Optional :class:`~configdiff.logging_config.LogContext`.
    """

    def __init__(
        self,
        settings: Optional[ReportSettings] = None,
        environment: ConfigEnvironment = ConfigEnvironment.PILOT_AND_PRODUCTION,
        log=None,
    ) -> None:
        self.settings = settings or ReportSettings()
        self.environment = environment
        self.log = get_context(log, __name__)
        self.report = io.StringIO()
        self.toc = io.StringIO()
        self.diffgram: Optional[DiffSnapshot] = None
        self.diffgrams: List[DiffSnapshot] = []

    # ---- diffgram bookkeeping ----
    def reset_diffgram(self) -> None:
        """Forget the diffgrams of the previous section."""
        self.diffgram = None
        self.diffgrams = []

    def add_diffgram(self, diffgram: DiffSnapshot) -> DiffSnapshot:
        if diffgram is None:
            raise ValueError("diffgram is required")
        self.diffgram = diffgram
        self.diffgrams.append(diffgram)
        return diffgram

    def create_diffgram(self, pilot: Snapshot, production: Snapshot) -> DiffSnapshot:
        """Diff *pilot* against *production* and add the result to the section."""
        return self.add_diffgram(diff_snapshots(pilot, production, log=self.log))

    def css_visibility_class(self) -> str:
        """``CanHide`` if the section has diffgrams and none of them has changes."""
        if not self.diffgrams or any(not d.can_hide for d in self.diffgrams):
            return ""
        return CAN_HIDE

    def toc_anchor_class(self) -> str:
        if self.environment is ConfigEnvironment.PRODUCTION_ONLY:
            return "toc-" + RowState.DELETED.value
        if self.environment is ConfigEnvironment.PILOT_ONLY:
            return "toc-" + RowState.ADDED.value
        return "toc"

    # ---- headings / toc ----
    def write_toc_entry(self, entry_text: str, level: int, bookmark: str, section_id: Optional[str]) -> None:
        visibility = self.css_visibility_class()
        self.toc.write(f'<span class="{_classes("toc" + str(level), visibility)}">')
        self.toc.write(jump_to_bookmark_location(bookmark, entry_text, section_id, self.toc_anchor_class()))
        self.toc.write("</span>")
        self.toc.write(f'<br class="{visibility}"/>\n')

    def write_section_header(
        self, title: str, level: int, bookmark: Optional[str] = None, section_id: Optional[str] = None
    ) -> None:
        """Write an ``<hN>`` heading with a bookmark, plus its ToC entry."""
        bookmark = title if bookmark is None else bookmark
        self.write_toc_entry(title, level, bookmark, section_id)

        self.report.write(f'<h{level} class="{self.css_visibility_class()}">')
        self.report.write(bookmark_location(bookmark, title, section_id, self.toc_anchor_class()))
        self.report.write(f"</h{level}>\n")

    # ---- tables ----
    def write_table_header_cell(self, text: str, row_span: int, col_span: int) -> None:
        self.report.write(
            f'<th class="column-th" rowspan="{row_span}" colspan="{col_span}">{html.escape(text or "")}</th>'
        )

    def write_table_header(self, header: Optional[Sequence[HeaderCell]]) -> None:
        if not header:
            return

        cells = sorted(header, key=lambda c: (c.row_index, c.column_index))

        self.report.write("<colgroup>")
        for cell in cells:
            # spanning cells carry no width; the row below defines it
            if cell.col_width:
                self.report.write(f'<col style="width:{cell.col_width}%;"/>')
        self.report.write("</colgroup>")

        self.report.write("<thead>")
        current_row = -1
        for cell in cells:
            if cell.row_index != current_row:
                if current_row != -1:
                    self.report.write("</tr>\n")
                current_row = cell.row_index
                self.report.write("<tr>")
            self.write_table_header_cell(cell.name, cell.row_span, cell.col_span)
        self.report.write("</tr>\n")
        self.report.write("</thead>")

    def write_table(
        self,
        diffgram: Optional[DiffSnapshot],
        header: Optional[Sequence[HeaderCell]] = None,
        table_size: HtmlTableSize = HtmlTableSize.STANDARD,
    ) -> None:
        """Write a ``<table>`` with *header* and the rows of *diffgram*."""
        self.report.write(f'<table class="{_classes(table_size.value, self.css_visibility_class())}">')
        self.write_table_header(header)

        if diffgram is not None and diffgram.root_rows:
            writer = RowWriter(self.report, diffgram, placeholder=self.settings.placeholder, log=self.log)
            writer.write_table_rows()

        self.report.write("</table>\n")

    # ---- text ----
    def write_content_paragraph(self, content: str, css_class: Optional[str] = None) -> None:
        css_class = self.css_visibility_class() if css_class is None else css_class
        self.report.write(f'\n<p class="{css_class}">{html.escape(content)}\n</p>')

    def write_break_tag(self) -> None:
        self.report.write("<br/>")

    def get_report(self) -> Tuple[str, str]:
        """Return ``(report_html, toc_html)``."""
        return self.report.getvalue(), self.toc.getvalue()

    # ---- page ----
    def render_page(
        self,
        report_html: str,
        toc_html: str,
        pilot_config: str,
        production_config: str,
        heading: Optional[str] = None,
    ) -> str:
        """Return the complete HTML page for the collected fragments."""
        s = self.settings
        heading = s.heading if heading is None else heading
        now = dt.datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        def span(css_class: str, text: str) -> str:
            return f'<span class="{css_class}">{html.escape(text)}</span>'

        lines: List[str] = []
        lines.append("<html>")
        lines.append("<head>")
        lines.append('<meta http-equiv="Content-Type" content="text/html; charset=UTF-8"/>')
        if s.stylesheet:
            lines.append(f'<link rel="stylesheet" type="text/css" href="{html.escape(s.stylesheet)}"/>')
        if s.script:
            lines.append(f'<script src="{html.escape(s.script)}"></script>')
        lines.append(f"<title>{html.escape(s.title)}</title>")
        lines.append("</head>")
        lines.append("<body>")
        lines.append(f"<h1>{html.escape(heading)}</h1>")

        lines.append(
            '<strong>Only Show Changes:</strong>'
            '<input type="checkbox" id="OnlyShowChanges" onclick="ToggleVisibility();"/><br/>'
        )
        lines.append(
            "<strong>Legend:</strong>"
            + span(RowState.ADDED.value, "Create ")
            + span(RowState.MODIFIED.value, "Update ")
            + span(RowState.DELETED.value, "Delete ")
            + "<br/>"
        )
        lines.append("<strong>Documenter Version:</strong>" + span(RowState.UNCHANGED.value, documenter_version()) + "<br/>")
        lines.append("<strong>Report Date:</strong>" + span(RowState.UNCHANGED.value, now) + "<br/>")
        lines.append("<strong>Target / Pilot Config:</strong>" + span(RowState.UNCHANGED.value, pilot_config) + "<br/>")
        lines.append(
            "<strong>Reference / Production Config:</strong>" + span(RowState.UNCHANGED.value, production_config) + "<br/>"
        )

        lines.append("<h1>Table of Contents</h1>")
        lines.append(toc_html)
        lines.append(report_html)
        lines.append("</body>")
        lines.append("</html>")
        return "\n".join(lines) + "\n"

    def write_report(
        self,
        path: Path,
        heading: Optional[str],
        report_html: Optional[str],
        toc_html: Optional[str],
        pilot_config: str,
        production_config: str,
    ) -> Path:
        """Write a complete HTML page to *path*.

        *report_html* and *toc_html* default to the fragments collected by
        this builder; *heading* defaults to the configured heading.
        """
        if report_html is None or toc_html is None:
            collected_report, collected_toc = self.get_report()
            report_html = collected_report if report_html is None else report_html
            toc_html = collected_toc if toc_html is None else toc_html
        page = self.render_page(report_html, toc_html, pilot_config, production_config, heading)
        write_text(path, page, encoding=self.settings.encoding)
        self.log.info("Report written: %s", path)
        return path


def _classes(*names: str) -> str:
    return " ".join(n for n in names if n)
