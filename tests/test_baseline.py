# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for baseline filtering and recording."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from phpstyle.diagnostics import (
    BaselineFilter,
    BaselineRecorder,
    DiagnosticNormalizer,
    InMemoryBaseline,
    PassthroughBaselineFilter,
    SarbBaselineFilter,
)
from phpstyle.errors import ToolInvocationError
from phpstyle.models import BaselineEntry


def test_passthrough_reports_every_finding(tmp_path: Path, phpcs_json, message) -> None:
    raw = phpcs_json({"a.php": [message(line=5)], "b.php": [message(line=1), message(line=2)]})

    diagnostics = PassthroughBaselineFilter(DiagnosticNormalizer(tmp_path)).filter(raw)

    assert [(d.file, d.line) for d in diagnostics] == [("a.php", 5), ("b.php", 1), ("b.php", 2)]


def test_in_memory_baseline_removes_only_matching_findings(tmp_path: Path, phpcs_json, message) -> None:
    raw = phpcs_json({"a.php": [message(line=5), message(line=6)]})
    baseline = InMemoryBaseline(
        DiagnosticNormalizer(tmp_path),
        [BaselineEntry(file="a.php", source="Squiz.Arrays.ArrayDeclaration.NoComma", line=5)],
    )

    diagnostics = baseline.filter(raw)

    assert [d.line for d in diagnostics] == [6]


def test_in_memory_baseline_without_matches_preserves_count(tmp_path: Path, phpcs_json, message) -> None:
    raw = phpcs_json({"a.php": [message(line=5), message(line=6)]})
    baseline = InMemoryBaseline(
        DiagnosticNormalizer(tmp_path),
        [BaselineEntry(file="other.php", source="Squiz.Arrays.ArrayDeclaration.NoComma", line=5)],
    )

    assert len(baseline.filter(raw)) == 2


def test_recording_twice_over_same_output_is_identical(tmp_path: Path, phpcs_json, message) -> None:
    raw = phpcs_json({"b.php": [message(line=9)], "a.php": [message(line=5)]})
    baseline = InMemoryBaseline(DiagnosticNormalizer(tmp_path))

    first = baseline.record(raw)
    snapshot = baseline.snapshot()
    second = baseline.record(raw)

    assert first.ok and second.ok
    assert baseline.snapshot() == snapshot
    assert [entry["file"] for entry in json.loads(snapshot)] == ["a.php", "b.php"]
    assert baseline.filter(raw) == []


def test_recording_replaces_previous_snapshot(tmp_path: Path, phpcs_json, message) -> None:
    baseline = InMemoryBaseline(DiagnosticNormalizer(tmp_path))
    baseline.record(phpcs_json({"a.php": [message(line=1)]}))

    baseline.record(phpcs_json({"b.php": [message(line=2)]}))

    assert {entry.file for entry in baseline.entries} == {"b.php"}


def test_sarb_filter_pipes_report_and_parses_result(tmp_path: Path, make_runner, phpcs_json, message) -> None:
    sarb_output = json.dumps(
        [
            {
                "file": "/app/classes/Foo.php",
                "line": 3,
                "type": "Generic.PHP.Syntax.Found",
                "message": "syntax",
                "severity": "error",
                "original_tool_details": {"line": 3, "source": "Generic.PHP.Syntax.Found", "message": "syntax"},
            },
        ],
    )
    runner = make_runner(sarb_output, returncode=1)
    baseline_path = tmp_path / "phpcs.baseline"
    sarb = SarbBaselineFilter(tmp_path, baseline_path, DiagnosticNormalizer(tmp_path), runner=runner)
    raw = phpcs_json({"/app/classes/Foo.php": [message(line=3)]})

    diagnostics = sarb.filter(raw)

    assert [(d.file, d.line) for d in diagnostics] == [("classes/Foo.php", 3)]
    argv, options = runner.calls[0]
    assert argv == (
        "php",
        "-d",
        "memory_limit=-1",
        "-d",
        "error_reporting=5",
        "./vendor/bin/sarb",
        "--output-format=json",
        "remove",
        str(baseline_path),
    )
    assert options.input == raw
    assert options.check is False
    assert options.cwd == tmp_path
    assert options.env is not None and options.env["XDEBUG_MODE"] == "off"


def test_sarb_filter_without_output_raises_with_command(tmp_path: Path, make_runner) -> None:
    runner = make_runner("", returncode=1, stderr="baseline file missing")
    sarb = SarbBaselineFilter(tmp_path, tmp_path / "phpcs.baseline", DiagnosticNormalizer(tmp_path), runner=runner)

    with pytest.raises(ToolInvocationError, match="baseline file missing") as excinfo:
        sarb.filter("{}")

    assert "sarb" in excinfo.value.command
    assert "remove" in excinfo.value.command


def test_sarb_record_runs_create(tmp_path: Path, make_runner) -> None:
    runner = make_runner("Baseline created", returncode=0)
    baseline_path = tmp_path / "phpcs.baseline"
    sarb = SarbBaselineFilter(tmp_path, baseline_path, DiagnosticNormalizer(tmp_path), runner=runner)

    result = sarb.record('{"files": {}}')

    assert result.ok
    assert result.output == "Baseline created"
    argv, options = runner.calls[0]
    assert argv[-3:] == ("create", "--input-format=phpcodesniffer-json", str(baseline_path))
    assert options.input == '{"files": {}}'


def test_implementations_satisfy_protocols(tmp_path: Path) -> None:
    normalizer = DiagnosticNormalizer(tmp_path)

    assert isinstance(PassthroughBaselineFilter(normalizer), BaselineFilter)
    assert isinstance(InMemoryBaseline(normalizer), BaselineRecorder)
    assert isinstance(SarbBaselineFilter(tmp_path, tmp_path / "b", normalizer), BaselineRecorder)
