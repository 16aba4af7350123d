"""CLI entry point for dirty."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import time
from pathlib import Path
from typing import Optional

from dirty import __version__
from dirty.classify import RepositoryResult, classify_all
from dirty.config import Config
from dirty.errors import DirtyError, NoMatchingRepositories, NoRepositoriesFound
from dirty.report import print_human, print_json, print_raw
from dirty.scanner import DEFAULT_DEPTH, discover, resolve_root

logger = logging.getLogger("dirty")


def _configure_logging(verbosity: int) -> None:
    """Route log records to stderr through rich so stdout stays clean."""
    from rich.console import Console
    from rich.logging import RichHandler

    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(level)
    logger.propagate = False


def scan(config: Config) -> tuple[Path, list[RepositoryResult]]:
    """Discover, classify and filter. Raises DirtyError on whole-scan failures."""
    base = resolve_root(config.path)
    filters = config.filters

    started = time.monotonic()
    repo_paths = discover(base, config.max_depth, config.exclude)
    if not repo_paths:
        raise NoRepositoriesFound(base)

    results = classify_all(repo_paths, filters.compute_ahead, config.workers)
    matched = filters.apply(results)
    logger.info(
        "%d of %d repos matched in %.2fs",
        len(matched), len(repo_paths), time.monotonic() - started,
    )
    if not matched:
        raise NoMatchingRepositories()
    return base, matched


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dirty",
        description="List git repos, their dirty status, and whether they're local-only.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to scan (default: current directory)",
    )
    parser.add_argument(
        "-L",
        dest="depth",
        type=int,
        default=DEFAULT_DEPTH,
        metavar="DEPTH",
        help=f"Max depth to search for repos (default: {DEFAULT_DEPTH})",
    )
    parser.add_argument(
        "-d", "--dirty",
        action="store_true",
        help="Only show dirty repos",
    )
    parser.add_argument(
        "-l", "--local",
        action="store_true",
        help="Only show local-only repos (no remotes)",
    )
    parser.add_argument(
        "--unpushed",
        action="store_true",
        help="Only show repos with commits ahead of upstream (slower: resolves tracking branches)",
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "-r", "--raw",
        action="store_true",
        help="Raw output for piping (one path per line)",
    )
    output.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output the report as JSON",
    )
    parser.add_argument(
        "-x", "--exclude",
        action="append",
        metavar="NAME",
        help="Directory name to skip while searching (repeatable)",
    )
    parser.add_argument(
        "-j", "--jobs",
        type=int,
        metavar="N",
        help="Number of repos to inspect in parallel (default: $DIRTY_JOBS or CPU count)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug detail)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"dirty {__version__}",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the dirty CLI."""
    if hasattr(signal, "SIGPIPE"):
        signal.signal(signal.SIGPIPE, signal.SIG_DFL)

    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = Config.from_args(args)
        workers = config.workers
    except ValueError as exc:
        parser.error(str(exc))

    _configure_logging(config.verbosity)
    logger.debug("scanning %s with depth %d on %d workers", config.path, config.max_depth, workers)

    try:
        base, results = scan(config)
    except DirtyError as exc:
        print(exc, file=sys.stderr)
        sys.exit(1)

    if config.output == "json":
        print_json(results, base, config.filters)
    elif config.output == "raw":
        print_raw(results, base)
    else:
        print_human(results, base, show_ahead=config.filters.unpushed_only)


if __name__ == "__main__":
    main()
