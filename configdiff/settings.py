"""
settings
========

YAML configuration for report rendering.

Example ``configdiff.yml``::

    report:
      title: "Sync Config Documenter Report"
      heading: "Pilot vs Production"
      placeholder: "-"
      stylesheet: "documenter.css"
      script: "documenter.js"
      encoding: "utf-8"

    logging:
      level: INFO
      format: readable     # readable | json

Every field can be overridden with an environment variable named
``CONFIGDIFF_<FIELD>`` (for example ``CONFIGDIFF_TITLE`` or
``CONFIGDIFF_LOG_LEVEL``). Precedence: env > config file > defaults.

:func:`configdiff.logging_config.configure_from_settings` applies the
``logging:`` block.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

ENV_PREFIX = "CONFIGDIFF"
LOG_FORMATS = ("readable", "json")


@dataclass(frozen=True)
class ReportSettings:
    """Rendering options shared by every section of a report."""

    title: str = "Configuration Documenter Report"
    heading: str = "Configuration Report"
    placeholder: str = "-"
    stylesheet: Optional[str] = None
    script: Optional[str] = None
    encoding: str = "utf-8"
    log_level: str = "INFO"
    log_format: str = "readable"


def load_config(path: Path) -> Dict[str, Any]:
    """Load a YAML config file.

    Raises
    ------
    SystemExit
        If the file does not exist.
    """
    if not path.exists():
        raise SystemExit(f"ERROR: config not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def deep_get(d: Dict[str, Any], keys: List[str], default: Any = None) -> Any:
    """Safely get nested dict value with default."""
    cur: Any = d
    for k in keys:
        if not isinstance(cur, dict) or k not in cur:
            return default
        cur = cur[k]
    return cur


def get_env_var(field: str) -> Optional[str]:
    """Return ``CONFIGDIFF_<FIELD>`` if set and non-empty."""
    value = os.environ.get(f"{ENV_PREFIX}_{field.upper()}")
    return value or None


def _pick(field: str, cfg_value: Any, default: Any) -> Any:
    env = get_env_var(field)
    if env is not None:
        return env
    if cfg_value is not None and cfg_value != "":
        return cfg_value
    return default


def read_settings(cfg: Dict[str, Any]) -> ReportSettings:
    """Build :class:`ReportSettings` from a loaded config dict plus env overrides."""
    defaults = ReportSettings()

    log_format = str(_pick("log_format", deep_get(cfg, ["logging", "format"]), defaults.log_format)).lower()
    if log_format not in LOG_FORMATS:
        log_format = defaults.log_format

    return ReportSettings(
        title=str(_pick("title", deep_get(cfg, ["report", "title"]), defaults.title)),
        heading=str(_pick("heading", deep_get(cfg, ["report", "heading"]), defaults.heading)),
        placeholder=str(_pick("placeholder", deep_get(cfg, ["report", "placeholder"]), defaults.placeholder)),
        stylesheet=_pick("stylesheet", deep_get(cfg, ["report", "stylesheet"]), defaults.stylesheet),
        script=_pick("script", deep_get(cfg, ["report", "script"]), defaults.script),
        encoding=str(_pick("encoding", deep_get(cfg, ["report", "encoding"]), defaults.encoding)),
        log_level=str(_pick("log_level", deep_get(cfg, ["logging", "level"]), defaults.log_level)).upper(),
        log_format=log_format,
    )


def load_settings(path: Optional[Path] = None) -> ReportSettings:
    """Load settings from *path*, or defaults (plus env) when *path* is None."""
    cfg = load_config(path) if path is not None else {}
    return read_settings(cfg)
