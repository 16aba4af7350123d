"""Whole-scan failures. Anything per-repository is absorbed, not raised."""

from __future__ import annotations

from pathlib import Path


class DirtyError(Exception):
    """A failure that ends the scan and is reported to the user."""


class PathUnavailable(DirtyError):
    def __init__(self, path: str | Path) -> None:
        self.path = path
        super().__init__(f"dirty: cannot access '{path}'")


class NoRepositoriesFound(DirtyError):
    def __init__(self, root: Path) -> None:
        self.root = root
        super().__init__(f"No git repos found in {root}")


class NoMatchingRepositories(DirtyError):
    def __init__(self) -> None:
        super().__init__("No matching repos found")
