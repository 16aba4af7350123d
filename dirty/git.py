"""Git backend: read-only, subprocess-based queries against one working copy."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 30

# Variables that point git at a repository other than the one under -C.
REPO_ENV_VARS = frozenset({
    "GIT_ALTERNATE_OBJECT_DIRECTORIES",
    "GIT_COMMON_DIR",
    "GIT_CONFIG",
    "GIT_CONFIG_COUNT",
    "GIT_CONFIG_PARAMETERS",
    "GIT_DIR",
    "GIT_GRAFT_FILE",
    "GIT_IMPLICIT_WORK_TREE",
    "GIT_INDEX_FILE",
    "GIT_NAMESPACE",
    "GIT_NO_REPLACE_OBJECTS",
    "GIT_OBJECT_DIRECTORY",
    "GIT_PREFIX",
    "GIT_REPLACE_REF_BASE",
    "GIT_SHALLOW_FILE",
    "GIT_WORK_TREE",
})


def _git_env() -> dict[str, str]:
    return {k: v for k, v in os.environ.items() if k not in REPO_ENV_VARS}


def _run_git(repo_path: str | Path, args: list[str], timeout: int = GIT_TIMEOUT) -> Optional[str]:
    """Run a git command and return stdout, or None if it failed."""
    cmd = ["git", "--no-optional-locks", "-C", str(repo_path)] + args
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            errors="replace",
            env=_git_env(),
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as exc:
        logger.debug("%s: %s", " ".join(cmd), exc)
        return None
    if result.returncode != 0:
        logger.debug("%s exited %d: %s", " ".join(cmd), result.returncode, result.stderr.strip())
        return None
    return result.stdout


def _lines(output: Optional[str]) -> Optional[list[str]]:
    if output is None:
        return None
    return [ln for ln in output.split("\n") if ln.strip()]


class Repository:
    """Handle on a single working copy. Cheap to create, holds no open state."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def __repr__(self) -> str:
        return f"Repository({str(self.path)!r})"

    @classmethod
    def open(cls, path: str | Path) -> Optional[Repository]:
        """Open the repo rooted exactly at path.

        git walks up past a broken ``.git`` into any enclosing repo, so path
        must itself be the top level: an empty ``--show-cdup``.
        """
        path = Path(path)
        cdup = _run_git(path, ["rev-parse", "--show-cdup"])
        if cdup is None or cdup.strip():
            return None
        return cls(path)

    def git(self, *args: str) -> Optional[str]:
        return _run_git(self.path, list(args))

    def status(self) -> Optional[list[str]]:
        """Porcelain status lines: untracked dirs collapsed, submodules ignored."""
        return _lines(self.git(
            "status", "--porcelain",
            "--untracked-files=normal",
            "--ignore-submodules=all",
        ))

    def remotes(self) -> Optional[list[str]]:
        return _lines(self.git("remote"))

    def head_branch(self) -> Optional[str]:
        """Full ref HEAD points at (e.g. refs/heads/main), None when detached."""
        out = self.git("symbolic-ref", "-q", "HEAD")
        if not out or not out.strip():
            return None
        return out.strip()

    def resolve(self, rev: str) -> Optional[str]:
        """Commit id for rev, None if it doesn't exist (unborn, missing ref)."""
        out = self.git("rev-parse", "-q", "--verify", f"{rev}^{{commit}}")
        if not out or not out.strip():
            return None
        return out.strip()

    def upstream(self, branch_ref: str) -> Optional[str]:
        """Configured upstream ref of a local branch, e.g. refs/remotes/origin/main."""
        out = self.git("for-each-ref", "--format=%(upstream)", branch_ref)
        if not out or not out.strip():
            return None
        return out.strip().split("\n")[0]

    def ahead_behind(self, local: str, upstream: str) -> Optional[tuple[int, int]]:
        """Commits reachable only from local, and only from upstream."""
        out = self.git("rev-list", "--left-right", "--count", f"{local}...{upstream}")
        if not out:
            return None
        parts = out.split()
        if len(parts) != 2:
            return None
        try:
            return int(parts[0]), int(parts[1])
        except ValueError:
            return None
