"""Tests for run configuration."""

from pathlib import Path

import pytest

from dirty.classify import Filters
from dirty.cli import build_parser
from dirty.config import Config


def test_defaults():
    config = Config()
    assert config.path == Path(".")
    assert config.max_depth == 3
    assert config.output == "human"
    assert config.filters == Filters()
    assert config.exclude == frozenset()


def test_string_path_is_converted():
    assert Config(path="~/code").path == Path("~/code")


@pytest.mark.parametrize("kwargs", [
    {"max_depth": -1},
    {"jobs": 0},
    {"output": "yaml"},
])
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValueError):
        Config(**kwargs)


def test_filters_from_flags():
    config = Config(dirty_only=True, unpushed_only=True)
    assert config.filters == Filters(dirty_only=True, unpushed_only=True)
    assert config.filters.compute_ahead is True


def test_workers_explicit(monkeypatch):
    monkeypatch.setenv("DIRTY_JOBS", "7")
    assert Config(jobs=3).workers == 3


def test_workers_from_env(monkeypatch):
    monkeypatch.setenv("DIRTY_JOBS", "7")
    assert Config().workers == 7


def test_workers_bad_env(monkeypatch):
    monkeypatch.setenv("DIRTY_JOBS", "lots")
    with pytest.raises(ValueError):
        Config().workers


def test_workers_default(monkeypatch):
    monkeypatch.setattr("dirty.classify.os.cpu_count", lambda: 6)
    assert Config().workers == 6


def test_from_args():
    args = build_parser().parse_args([
        "~/src", "-L", "5", "-d", "--unpushed", "--json",
        "-x", "node_modules", "-x", ".venv", "-j", "2", "-vv",
    ])
    config = Config.from_args(args)
    assert config.path == Path("~/src")
    assert config.max_depth == 5
    assert config.dirty_only and config.unpushed_only and not config.local_only
    assert config.output == "json"
    assert config.exclude == frozenset({"node_modules", ".venv"})
    assert config.jobs == 2
    assert config.verbosity == 2


def test_from_args_raw():
    config = Config.from_args(build_parser().parse_args(["-r"]))
    assert config.output == "raw"
    assert config.path == Path(".")
