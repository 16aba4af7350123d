"""Per-repo classification: dirty, local-only and ahead-of-upstream."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from dirty.git import Repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepositoryResult:
    path: Path
    is_dirty: bool
    is_local_only: bool
    ahead: Optional[int] = None


@dataclass(frozen=True)
class Filters:
    """Which repos make it into the report. All off means everything."""

    dirty_only: bool = False
    local_only: bool = False
    unpushed_only: bool = False

    @property
    def compute_ahead(self) -> bool:
        return self.unpushed_only

    def matches(self, result: RepositoryResult) -> bool:
        # Unknown ahead counts as zero: an undeterminable repo is never "unpushed".
        return (
            (not self.dirty_only or result.is_dirty)
            and (not self.local_only or result.is_local_only)
            and (not self.unpushed_only or (result.ahead or 0) > 0)
        )

    def apply(self, results: Iterable[RepositoryResult]) -> list[RepositoryResult]:
        return [r for r in results if self.matches(r)]


def ahead_of_upstream(repo: Repository) -> Optional[int]:
    """Commits on the current branch missing from its upstream, if knowable."""
    branch = repo.head_branch()
    if branch is None:
        return None
    head = repo.resolve(branch)
    if head is None:
        return None

    upstream_ref = repo.upstream(branch)
    if upstream_ref is None:
        return None
    upstream = repo.resolve(upstream_ref)
    if upstream is None:
        return None

    counts = repo.ahead_behind(head, upstream)
    if counts is None:
        return None
    ahead, _behind = counts
    return ahead


def classify(path: str | Path, compute_ahead: bool = False) -> Optional[RepositoryResult]:
    """Inspect one repo. Returns None if it can't be opened or read."""
    path = Path(path)
    repo = Repository.open(path)
    if repo is None:
        logger.debug("cannot open %s", path)
        return None

    status = repo.status()
    if status is None:
        logger.debug("cannot read status of %s", path)
        return None

    # A failed remote listing counts as no remotes.
    remotes = repo.remotes()

    return RepositoryResult(
        path=path,
        is_dirty=bool(status),
        is_local_only=not remotes,
        ahead=ahead_of_upstream(repo) if compute_ahead else None,
    )


def default_workers() -> int:
    return os.cpu_count() or 1


def classify_all(
    paths: Iterable[Path],
    compute_ahead: bool = False,
    workers: Optional[int] = None,
) -> list[RepositoryResult]:
    """Classify every path on a thread pool; results come back sorted by path."""
    paths = list(paths)
    if not paths:
        return []

    results: list[RepositoryResult] = []
    with ThreadPoolExecutor(max_workers=workers or default_workers()) as executor:
        futures = {executor.submit(classify, p, compute_ahead): p for p in paths}
        for future in as_completed(futures):
            try:
                result = future.result()
            except Exception:
                logger.debug("classifying %s failed", futures[future], exc_info=True)
                continue
            if result is not None:
                results.append(result)

    results.sort(key=lambda r: r.path)
    logger.info("classified %d of %d repos", len(results), len(paths))
    return results
