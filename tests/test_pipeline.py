# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the style pipeline and baseline creation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from phpstyle.config import StyleConfig
from phpstyle.diagnostics import DiagnosticNormalizer, InMemoryBaseline, PassthroughBaselineFilter, PathExclusionPolicy
from phpstyle.discovery import ChangeSetResolver
from phpstyle.engine import LintReport
from phpstyle.errors import ConfigError, ToolInvocationError
from phpstyle.models import BaselineEntry, ChangeSet, ExitStatus
from phpstyle.pipeline import PipelineOutcome, StylePipeline, build_baseline


@dataclass
class FakeEngine:
    stdout: str = ""
    scanned: list[ChangeSet] = field(default_factory=list)
    directories: list[tuple[str, ...]] = field(default_factory=list)

    def scan(self, changeset: ChangeSet) -> LintReport:
        self.scanned.append(changeset)
        if not self.stdout:
            raise ToolInvocationError("No output received from phpcs", command=["vendor/bin/phpcs"])
        return LintReport(command=("vendor/bin/phpcs",), stdout=self.stdout, returncode=1)

    def scan_directories(self, directories: Sequence[str]) -> LintReport:
        self.directories.append(tuple(directories))
        return LintReport(command=("vendor/bin/phpcs", *directories), stdout=self.stdout)


def _pipeline(root: Path, vcs, engine: FakeEngine, *, baseline=None, excluded: tuple[str, ...] = (), hook=None):
    config = StyleConfig(excluded_directories=excluded)
    exclusions = PathExclusionPolicy(config.excluded_directories)
    normalizer = DiagnosticNormalizer(root)
    return StylePipeline(
        ChangeSetResolver(root, config, vcs, exclusions=exclusions),
        engine,
        baseline or PassthroughBaselineFilter(normalizer),
        exclusions,
        on_changeset=hook,
    )


def test_bypass_run_reports_single_diagnostic(project_root: Path, write_php, make_vcs, phpcs_json, message) -> None:
    write_php("a.php")
    engine = FakeEngine(stdout=phpcs_json({"a.php": [message(line=5)]}))

    result = _pipeline(project_root, make_vcs([]), engine).run(["a.php"])

    assert result.outcome is PipelineOutcome.FAILED
    assert result.exit_status is ExitStatus.FAILURE
    assert [(d.file, d.line) for d in result.diagnostics] == [("a.php", 5)]
    assert result.report is not None


def test_only_deleted_changes_never_invoke_engine(project_root: Path, make_vcs) -> None:
    engine = FakeEngine()
    announced: list[ChangeSet] = []

    result = _pipeline(project_root, make_vcs(["classes/Deleted.php"]), engine, hook=announced.append).run()

    assert result.outcome is PipelineOutcome.NOTHING_TO_CHECK
    assert result.exit_status is ExitStatus.SUCCESS
    assert engine.scanned == []
    assert announced == []


def test_changed_files_flow_through_baseline_and_exclusions(
    project_root: Path,
    write_php,
    make_vcs,
    phpcs_json,
    message,
) -> None:
    write_php("classes/Foo.php")
    write_php("classes/Legacy/Old.php")
    engine = FakeEngine(
        stdout=phpcs_json(
            {
                f"{project_root}/classes/Foo.php": [message(line=3), message(line=8)],
                f"{project_root}/classes/Legacy/Old.php": [message(line=1)],
            },
        ),
    )
    baseline = InMemoryBaseline(
        DiagnosticNormalizer(project_root),
        [BaselineEntry(file="classes/Foo.php", source="Squiz.Arrays.ArrayDeclaration.NoComma", line=3)],
    )
    announced: list[ChangeSet] = []
    vcs = make_vcs(["classes/Foo.php"])

    result = _pipeline(
        project_root,
        vcs,
        engine,
        baseline=baseline,
        excluded=("classes/Legacy",),
        hook=announced.append,
    ).run()

    assert [(d.file, d.line) for d in result.diagnostics] == [("classes/Foo.php", 8)]
    assert engine.scanned[0].paths == ("classes/Foo.php",)
    assert announced == [engine.scanned[0]]


def test_clean_report_passes(project_root: Path, write_php, make_vcs, phpcs_json) -> None:
    write_php("classes/Foo.php")
    engine = FakeEngine(stdout=phpcs_json({"classes/Foo.php": []}))

    result = _pipeline(project_root, make_vcs(["classes/Foo.php"]), engine).run()

    assert result.outcome is PipelineOutcome.PASSED
    assert result.diagnostics == ()


def test_engine_without_output_propagates(project_root: Path, write_php, make_vcs) -> None:
    write_php("classes/Foo.php")

    with pytest.raises(ToolInvocationError):
        _pipeline(project_root, make_vcs(["classes/Foo.php"]), FakeEngine()).run()


def test_baseline_creation_is_stable(project_root: Path, phpcs_json, message) -> None:
    engine = FakeEngine(stdout=phpcs_json({"classes/Foo.php": [message(line=2)], "tests/FooTest.php": [message()]}))
    recorder = InMemoryBaseline(DiagnosticNormalizer(project_root))
    config = StyleConfig()

    first = build_baseline(project_root, config, engine, recorder)
    snapshot = recorder.snapshot()
    second = build_baseline(project_root, config, engine, recorder)

    assert first.directories == ("tests", "classes")
    assert engine.directories == [("tests", "classes"), ("tests", "classes")]
    assert first.result.ok and second.result.ok
    assert recorder.snapshot() == snapshot


def test_baseline_creation_requires_a_directory(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="baseline directories"):
        build_baseline(tmp_path, StyleConfig(), FakeEngine(), InMemoryBaseline(DiagnosticNormalizer(tmp_path)))
