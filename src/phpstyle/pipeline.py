# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Orchestrate change-set resolution, linting, baseline filtering and exclusion."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from .config import StyleConfig
from .diagnostics.baseline import BaselineFilter, BaselineRecorder, RecordResult
from .diagnostics.exclusion import PathExclusionPolicy
from .discovery.changeset import ChangeSetResolver
from .engine.phpcs import LintReport
from .errors import ConfigError
from .models import ChangeSet, Diagnostic, ExitStatus

LOGGER = logging.getLogger(__name__)

ChangeSetHook = Callable[[ChangeSet], None]


class LintEngine(Protocol):
    """Engine able to lint a change set or whole directories."""

    def scan(self, changeset: ChangeSet) -> LintReport:
        """Lint the paths of ``changeset``."""

    def scan_directories(self, directories: Sequence[str]) -> LintReport:
        """Lint every source file below ``directories``."""


class PipelineOutcome(str, Enum):
    """Terminal state reached by one pipeline run."""

    NOTHING_TO_CHECK = "nothing_to_check"
    PASSED = "passed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Change set, surviving diagnostics and the engine report of one run."""

    changeset: ChangeSet
    diagnostics: tuple[Diagnostic, ...] = ()
    report: LintReport | None = None

    @property
    def outcome(self) -> PipelineOutcome:
        if self.changeset.is_empty:
            return PipelineOutcome.NOTHING_TO_CHECK
        return PipelineOutcome.FAILED if self.diagnostics else PipelineOutcome.PASSED

    @property
    def exit_status(self) -> ExitStatus:
        return ExitStatus.FAILURE if self.outcome is PipelineOutcome.FAILED else ExitStatus.SUCCESS


class StylePipeline:
    """Run one style check from change-set resolution to surviving diagnostics.

    Every stage returns a new immutable value; an empty change set ends the
    run before the lint engine is touched.
    """

    def __init__(
        self,
        resolver: ChangeSetResolver,
        engine: LintEngine,
        baseline: BaselineFilter,
        exclusions: PathExclusionPolicy,
        *,
        on_changeset: ChangeSetHook | None = None,
    ) -> None:
        """Wire the pipeline stages together.

        Args:
            resolver: Produces the change set to scan.
            engine: Lint engine invoked for non-empty change sets.
            baseline: Filter removing previously accepted findings.
            exclusions: Policy dropping diagnostics in excluded directories.
            on_changeset: Optional hook notified once a non-empty change set
                has been resolved, before the engine runs.
        """

        self._resolver = resolver
        self._engine = engine
        self._baseline = baseline
        self._exclusions = exclusions
        self._on_changeset = on_changeset

    def run(self, explicit_paths: Sequence[str] = ()) -> PipelineResult:
        """Execute the pipeline.

        Args:
            explicit_paths: Paths supplied by the user; empty to consult git.

        Returns:
            PipelineResult: Outcome of the run.

        Raises:
            ChangeSetResolutionError: If git could not describe the branch.
            ToolInvocationError: If the engine or baseline tool printed nothing.
            DiagnosticParseError: If a tool report could not be parsed.
        """

        changeset = self._resolver.resolve(explicit_paths)
        if changeset.is_empty:
            LOGGER.debug("nothing to check ancestor=%s", changeset.ancestor)
            return PipelineResult(changeset=changeset)
        if self._on_changeset is not None:
            self._on_changeset(changeset)
        report = self._engine.scan(changeset)
        diagnostics = self._baseline.filter(report.stdout)
        surviving = self._exclusions.apply(diagnostics)
        LOGGER.debug(
            "pipeline finished mode=%s paths=%d reported=%d surviving=%d",
            changeset.mode.value,
            len(changeset),
            len(diagnostics),
            len(surviving),
        )
        return PipelineResult(changeset=changeset, diagnostics=tuple(surviving), report=report)


@dataclass(frozen=True, slots=True)
class BaselineBuild:
    """Directories scanned for a new baseline and the recorder's verdict."""

    directories: tuple[str, ...]
    result: RecordResult
    report: LintReport


def existing_baseline_directories(root: Path, config: StyleConfig) -> tuple[str, ...]:
    """Return the configured baseline directories present under ``root``, in config order."""

    return tuple(directory for directory in config.baseline_directories if (root / directory).is_dir())


def build_baseline(root: Path, config: StyleConfig, engine: LintEngine, recorder: BaselineRecorder) -> BaselineBuild:
    """Scan the baseline directories and replace the baseline snapshot.

    Raises:
        ConfigError: If none of the configured baseline directories exist.
        ToolInvocationError: If the lint engine printed nothing.
    """

    directories = existing_baseline_directories(root, config)
    if not directories:
        configured = ", ".join(config.baseline_directories) or "<none>"
        raise ConfigError(f"None of the baseline directories exist under {root}: {configured}")
    report = engine.scan_directories(directories)
    return BaselineBuild(directories=directories, result=recorder.record(report.stdout), report=report)


__all__ = [
    "BaselineBuild",
    "LintEngine",
    "PipelineOutcome",
    "PipelineResult",
    "StylePipeline",
    "build_baseline",
    "existing_baseline_directories",
]
