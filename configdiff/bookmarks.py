"""
bookmarks
=========

Bookmark anchors and jump links.

Anchor names are a deterministic hash of ``section_id + text`` so that two
unrelated parts of a report that mention the same entity produce the same
anchor name without sharing any registry.
"""

from __future__ import annotations

import hashlib
import html
from typing import Optional, TextIO


def bookmark_code(text: Optional[str], section_id: Optional[str]) -> str:
    """Return the anchor name for *text* within *section_id*.

    The upper-cased concatenation is hashed to a signed 32-bit integer and
    rendered in decimal, with ``-`` replaced by ``_`` (some word processors
    reject hyphens in bookmark names).

    Examples
    --------
    >>> bookmark_code("Contoso", "A") == bookmark_code("contoso", "a")
    True
    """
    source = ((section_id or "") + (text or "")).upper()
    digest = hashlib.md5(source.encode("utf-8")).digest()
    code = int.from_bytes(digest[:4], "big", signed=True)
    return str(code).replace("-", "_")


def bookmark_location(bookmark: str, display_text: str, section_id: Optional[str], anchor_class: str) -> str:
    """Markup of a named anchor."""
    return (
        f'<a class="{html.escape(anchor_class)}" name="{bookmark_code(bookmark, section_id)}">'
        f"{html.escape(display_text)}</a>"
    )


def jump_to_bookmark_location(bookmark: str, display_text: str, section_id: Optional[str], css_class: str) -> str:
    """Markup of a link to the anchor written by :func:`bookmark_location`."""
    return (
        f'<a class="{html.escape(css_class)}" href="#{bookmark_code(bookmark, section_id)}">'
        f"{html.escape(display_text)}</a>"
    )


def write_bookmark_location(
    out: TextIO, bookmark: str, section_id: Optional[str], anchor_class: str, display_text: Optional[str] = None
) -> None:
    if out is None:
        raise ValueError("out is required")
    out.write(bookmark_location(bookmark, bookmark if display_text is None else display_text, section_id, anchor_class))


def write_jump_to_bookmark_location(
    out: TextIO, bookmark: str, section_id: Optional[str], css_class: str, display_text: Optional[str] = None
) -> None:
    if out is None:
        raise ValueError("out is required")
    out.write(
        jump_to_bookmark_location(bookmark, bookmark if display_text is None else display_text, section_id, css_class)
    )
