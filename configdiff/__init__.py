"""Pilot-vs-production configuration diff and HTML report toolkit.

This package builds relational snapshots of configuration sections,
diffs a pilot snapshot against production, and renders the result as
master/detail HTML tables with change highlighting.
"""

from .bookmarks import bookmark_code
from .differ import DiffRow, DiffTable, RowState, diff_tables
from .diffgram import DiffSnapshot, diff_snapshots
from .exceptions import ConfigDiffError, LayoutError, SchemaMismatchError
from .layout import PrintLayout, PrintSetting
from .logging_config import LogContext, configure_from_settings, configure_logging
from .model import Column, ColumnType, Relation, Row, Snapshot, Table
from .presets import simple_ordered_settings_snapshots, simple_settings_snapshots
from .report import ConfigEnvironment, HeaderCell, HtmlTableSize, ReportBuilder, simple_settings_header
from .settings import ReportSettings, load_settings
from .writer import RowWriter

__all__ = [
    "Column",
    "ColumnType",
    "Row",
    "Table",
    "Relation",
    "Snapshot",
    "PrintLayout",
    "PrintSetting",
    "RowState",
    "DiffRow",
    "DiffTable",
    "diff_tables",
    "DiffSnapshot",
    "diff_snapshots",
    "RowWriter",
    "bookmark_code",
    "ReportBuilder",
    "ConfigEnvironment",
    "HtmlTableSize",
    "HeaderCell",
    "simple_settings_header",
    "simple_settings_snapshots",
    "simple_ordered_settings_snapshots",
    "ReportSettings",
    "load_settings",
    "LogContext",
    "configure_logging",
    "configure_from_settings",
    "ConfigDiffError",
    "SchemaMismatchError",
    "LayoutError",
]
