"""Report rendering: human (rich), raw paths, and JSON."""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO

from rich.console import Console
from rich.text import Text

from dirty.classify import Filters, RepositoryResult
from dirty.theme import ahead_marker, dirty_marker, local_marker


@dataclass
class Summary:
    total: int
    dirty: int
    local_only: int


def summarize(results: list[RepositoryResult]) -> Summary:
    return Summary(
        total=len(results),
        dirty=sum(1 for r in results if r.is_dirty),
        local_only=sum(1 for r in results if r.is_local_only),
    )


def relative(path: Path, base: Path) -> str:
    """Path as shown to the user: relative to the scan root where possible."""
    try:
        return str(path.relative_to(base))
    except ValueError:
        return str(path)


def printable(text: str) -> str:
    """Undecodable filename bytes as backslash escapes, safe for any stream."""
    return os.fsencode(text).decode("utf-8", "backslashreplace")


def format_line(result: RepositoryResult, base: Path, show_ahead: bool = False) -> Text:
    """One report line: ` * some/repo [local] [↑2]`."""
    line = Text(" ")
    line.append_text(dirty_marker(result.is_dirty))
    line.append(" ")
    line.append(printable(relative(result.path, base)))
    if result.is_local_only:
        line.append(" ")
        line.append_text(local_marker())
    if show_ahead:
        line.append(" ")
        line.append_text(ahead_marker(result.ahead))
    return line


def format_summary(summary: Summary) -> str:
    return f"{summary.total} repos, {summary.dirty} dirty, {summary.local_only} local-only"


def print_human(
    results: list[RepositoryResult],
    base: Path,
    *,
    show_ahead: bool = False,
    console: Optional[Console] = None,
) -> None:
    """Print the colored report with a summary line to stdout."""
    console = console or Console(highlight=False, soft_wrap=True)
    for result in results:
        console.print(format_line(result, base, show_ahead))
    console.print()
    console.print(format_summary(summarize(results)), markup=False)


def print_raw(results: list[RepositoryResult], base: Path, file: Optional[TextIO] = None) -> None:
    """One relative path per line, nothing else, for piping.

    Paths go out as their raw filesystem bytes when the stream allows it.
    """
    file = file or sys.stdout
    buffer = getattr(file, "buffer", None)
    if buffer is not None:
        file.flush()
    for result in results:
        rel = relative(result.path, base)
        if buffer is None:
            print(printable(rel), file=file)
        else:
            buffer.write(os.fsencode(rel) + b"\n")
    if buffer is not None:
        buffer.flush()


def to_json(results: list[RepositoryResult], base: Path, filters: Filters) -> dict:
    summary = summarize(results)
    return {
        "root": printable(str(base)),
        "filters": {
            "dirty": filters.dirty_only,
            "local": filters.local_only,
            "unpushed": filters.unpushed_only,
        },
        "summary": {
            "total": summary.total,
            "dirty": summary.dirty,
            "local_only": summary.local_only,
        },
        "repos": [
            {
                "path": printable(str(r.path)),
                "relative": printable(relative(r.path, base)),
                "dirty": r.is_dirty,
                "local_only": r.is_local_only,
                "ahead": r.ahead,
            }
            for r in results
        ],
    }


def print_json(
    results: list[RepositoryResult],
    base: Path,
    filters: Filters,
    file: Optional[TextIO] = None,
) -> None:
    """Dump the report as JSON to stdout."""
    print(json.dumps(to_json(results, base, filters), indent=2), file=file)
