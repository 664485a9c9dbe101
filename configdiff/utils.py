"""
utils
=====

Small, shared utilities used across the codebase.

This module intentionally contains only low-level helpers that are safe to
import from anywhere (no report state, no heavy imports).

Functions
---------
- :func:`safe_name`:
  Convert an arbitrary identifier (section title, config folder) into a
  filesystem-safe filename component.
- :func:`report_file_base_name`:
  Name a report after the two configuration folders it compares.
- :func:`write_text`:
  UTF-8 file writer with normalized newlines.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional


def safe_name(value: str) -> str:
    """Return a filesystem-safe version of *value*.

    Parameters
    ----------
    value:
        The input string to sanitize (e.g., a configuration folder path).

    Returns
    -------
    str
        A sanitized string containing only ``[A-Za-z0-9._-]`` plus underscores,
        with surrounding underscores removed. Returns ``"unnamed"`` if the
        result would otherwise be empty.

    Examples
    --------
    >>> safe_name("Pilot Config$2025")
    'Pilot_Config_2025'
    >>> safe_name("")
    'unnamed'
    """
    out = re.sub(r"[^A-Za-z0-9._-]+", "_", value).strip("_")
    return out or "unnamed"


def report_file_base_name(pilot_config: Optional[str], production_config: Optional[str]) -> str:
    """Return the report file base name for a pilot/production pair.

    Examples
    --------
    >>> report_file_base_name("Contoso/Pilot", "Contoso/Production")
    'Contoso_Pilot_AppliedTo_Contoso_Production'
    """
    pilot = safe_name((pilot_config or "").replace("\\", "_").replace("/", "_"))
    production = safe_name((production_config or "").replace("\\", "_").replace("/", "_"))
    return f"{pilot}_AppliedTo_{production}"


def write_text(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Write *content* to *path* with normalized newlines, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    content = content.replace("\r\n", "\n").replace("\r", "\n")
    path.write_text(content, encoding=encoding)
