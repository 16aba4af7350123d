"""Shared fixtures: throwaway git repos built with the real git binary."""

import os
import subprocess
import sys
import tempfile

import pytest


def run_git(path: str, *args: str) -> str:
    result = subprocess.run(
        ["git", "-C", path, *args],
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


def _init_repo(path: str) -> None:
    os.makedirs(path, exist_ok=True)
    run_git(path, "init", "-q", "-b", "main")
    run_git(path, "config", "user.email", "test@test.com")
    run_git(path, "config", "user.name", "Test User")
    run_git(path, "config", "commit.gpgsign", "false")


@pytest.fixture(autouse=True)
def _plain_output(monkeypatch):
    """Keep rich from forcing ANSI codes into captured output."""
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.delenv("DIRTY_JOBS", raising=False)


@pytest.fixture
def git():
    return run_git


@pytest.fixture
def make_repo():
    """Factory: make_repo(path, remote=..., dirty=..., commit=...) -> path."""

    def _make(path: str, *, remote: bool = False, dirty: bool = False, commit: bool = True) -> str:
        _init_repo(path)
        if commit:
            run_git(path, "commit", "--allow-empty", "-q", "-m", "init")
        if remote:
            run_git(path, "remote", "add", "origin", "https://example.com/repo.git")
        if dirty:
            with open(os.path.join(path, "untracked.txt"), "w") as f:
                f.write("hello\n")
        return path

    return _make


@pytest.fixture
def make_tracked_repo(make_repo):
    """Factory: a repo pushed to a local bare remote with main tracking origin/main."""

    def _make(root: str, name: str = "local") -> str:
        bare = os.path.join(root, f"{name}-remote.git")
        subprocess.run(["git", "init", "-q", "--bare", bare], capture_output=True, check=True)
        path = make_repo(os.path.join(root, name))
        run_git(path, "remote", "add", "origin", bare)
        run_git(path, "push", "-q", "-u", "origin", "main")
        return path

    return _make


@pytest.fixture
def undecodable_name():
    """A directory name whose bytes are not valid UTF-8, e.g. latin-1 'café'."""
    if sys.getfilesystemencoding().lower() not in ("utf-8", "utf8"):
        pytest.skip("filesystem encoding is not utf-8")
    name = os.fsdecode(b"caf\xe9")
    with tempfile.TemporaryDirectory() as tmp:
        try:
            os.mkdir(os.path.join(tmp, name))
        except OSError:
            pytest.skip("filesystem rejects non-utf-8 names")
    return name
