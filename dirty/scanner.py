"""Repo discovery: recursively find git working copies under a directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from dirty.errors import PathUnavailable

logger = logging.getLogger(__name__)

MARKER = ".git"
DEFAULT_DEPTH = 3


def resolve_root(root: str | Path) -> Path:
    """Expand and canonicalize the scan root, or raise PathUnavailable."""
    try:
        return Path(os.path.expanduser(str(root))).resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        logger.debug("cannot resolve %s: %s", root, exc)
        raise PathUnavailable(root) from exc


def discover(
    root: str | Path,
    max_depth: int = DEFAULT_DEPTH,
    exclude: Iterable[str] = (),
) -> list[Path]:
    """Recursively find all git repository roots under root.

    A directory holding a ``.git`` entry is recorded and never descended
    into, so nested repos and submodules don't show up twice. Directories
    deeper than max_depth are dropped. Symlinked directories are not
    followed. Returns absolute paths in lexicographic order.
    """
    base = resolve_root(root)
    skip = frozenset(exclude)
    repos: list[Path] = []

    def _walk(path: str, depth: int) -> None:
        if depth > max_depth:
            return
        try:
            entries = list(os.scandir(path))
        except OSError as exc:
            logger.debug("skipping unreadable %s: %s", path, exc)
            return

        has_git = False
        subdirs: list[os.DirEntry] = []

        for entry in entries:
            # A dangling .git symlink is not a marker.
            if entry.name == MARKER and os.path.exists(entry.path):
                has_git = True
                break
            try:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(entry)
            except OSError:
                continue

        if has_git:
            repos.append(Path(path))
            return

        for d in subdirs:
            if d.name in skip:
                continue
            _walk(d.path, depth + 1)

    _walk(str(base), 0)
    repos.sort()
    logger.info("found %d repos under %s", len(repos), base)
    return repos
