"""Shared visual constants and helpers for dirty."""

from __future__ import annotations

from typing import Optional

from rich.style import Style
from rich.text import Text

# ── Color Palette ───────────────────────────────────────────────────────

RED = "red"
YELLOW = "yellow"
BLUE = "blue"

# ── Markers ─────────────────────────────────────────────────────────────

DIRTY_MARK = "*"
LOCAL_MARK = "[local]"
AHEAD_ARROW = "↑"


def dirty_marker(is_dirty: bool) -> Text:
    """Red star for a dirty working tree, a blank of the same width otherwise."""
    if is_dirty:
        return Text(DIRTY_MARK, style=Style(color=RED))
    return Text(" ")


def local_marker() -> Text:
    return Text(LOCAL_MARK, style=Style(color=YELLOW))


def ahead_marker(ahead: Optional[int]) -> Text:
    """Unpushed commit badge; an unknown count shows as 0."""
    return Text(f"[{AHEAD_ARROW}{ahead or 0}]", style=Style(color=BLUE))
