"""Run configuration for a dirty scan, validated on construction."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dirty.classify import Filters, default_workers
from dirty.scanner import DEFAULT_DEPTH

JOBS_ENV = "DIRTY_JOBS"
OUTPUT_MODES = ("human", "raw", "json")


@dataclass
class Config:
    path: Path = field(default_factory=lambda: Path("."))
    max_depth: int = DEFAULT_DEPTH

    # Filters
    dirty_only: bool = False
    local_only: bool = False
    unpushed_only: bool = False

    output: str = "human"
    jobs: Optional[int] = None
    exclude: frozenset[str] = frozenset()
    verbosity: int = 0

    def __post_init__(self):
        """Validate configuration after initialization."""
        if isinstance(self.path, str):
            self.path = Path(self.path)
        self.exclude = frozenset(self.exclude)

        if self.max_depth < 0:
            raise ValueError(f"depth must be non-negative, got {self.max_depth}")
        if self.jobs is not None and self.jobs < 1:
            raise ValueError(f"jobs must be at least 1, got {self.jobs}")
        if self.output not in OUTPUT_MODES:
            raise ValueError(f"Invalid output mode: {self.output}. Must be one of {OUTPUT_MODES}")

    @property
    def filters(self) -> Filters:
        return Filters(
            dirty_only=self.dirty_only,
            local_only=self.local_only,
            unpushed_only=self.unpushed_only,
        )

    @property
    def workers(self) -> int:
        """Pool size: --jobs, then $DIRTY_JOBS, then the CPU count."""
        if self.jobs is not None:
            return self.jobs
        env = os.environ.get(JOBS_ENV, "").strip()
        if env:
            try:
                value = int(env)
            except ValueError:
                raise ValueError(f"{JOBS_ENV} must be an integer, got {env!r}") from None
            if value < 1:
                raise ValueError(f"{JOBS_ENV} must be at least 1, got {value}")
            return value
        return default_workers()

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> Config:
        if args.json_output:
            output = "json"
        elif args.raw:
            output = "raw"
        else:
            output = "human"
        return cls(
            path=Path(args.path),
            max_depth=args.depth,
            dirty_only=args.dirty,
            local_only=args.local,
            unpushed_only=args.unpushed,
            output=output,
            jobs=args.jobs,
            exclude=frozenset(args.exclude or ()),
            verbosity=args.verbose,
        )
