# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from subprocess import CompletedProcess

import pytest

from phpstyle.core.console import get_console_manager
from phpstyle.core.runtime.process import CommandOptions
from phpstyle.discovery.git import BranchModifications


@dataclass
class FakeRunner:
    """Command runner double returning queued results and recording calls."""

    results: list[CompletedProcess[str]] = field(default_factory=list)
    calls: list[tuple[tuple[str, ...], CommandOptions]] = field(default_factory=list)

    def __call__(self, args: Sequence[str], options: CommandOptions | None = None) -> CompletedProcess[str]:
        argv = tuple(args)
        self.calls.append((argv, options or CommandOptions()))
        if not self.results:
            raise AssertionError(f"unexpected command: {argv}")
        return self.results.pop(0)


@dataclass
class FakeVcs:
    """Version-control double returning canned branch modifications."""

    modifications: BranchModifications
    fetches: int = 0
    queries: int = 0

    def fetch_all(self) -> None:
        self.fetches += 1

    def branch_modifications(self) -> BranchModifications:
        self.queries += 1
        return self.modifications


@pytest.fixture(autouse=True)
def _fresh_consoles() -> Iterable[None]:
    get_console_manager().clear()
    yield
    get_console_manager().clear()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Return a project root holding the default whitelisted directories."""

    root = tmp_path / "project"
    for directory in ("classes", "tests", "src"):
        (root / directory).mkdir(parents=True)
    return root.resolve()


@pytest.fixture
def write_php(project_root: Path) -> Callable[..., str]:
    def _write(relative: str, body: str = "<?php\n") -> str:
        path = project_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")
        return relative

    return _write


@pytest.fixture
def make_runner() -> Callable[..., FakeRunner]:
    def _make(*stdouts: str, returncode: int = 0, stderr: str = "") -> FakeRunner:
        results = [CompletedProcess(args=[], returncode=returncode, stdout=out, stderr=stderr) for out in stdouts]
        return FakeRunner(results=results)

    return _make


@pytest.fixture
def make_vcs() -> Callable[..., FakeVcs]:
    def _make(paths: Sequence[str], *, ancestor: str = "origin/main", new: Iterable[str] = ()) -> FakeVcs:
        return FakeVcs(BranchModifications(tuple(paths), ancestor, frozenset(new)))

    return _make


@pytest.fixture
def phpcs_json() -> Callable[[Mapping[str, Sequence[Mapping[str, object]]]], str]:
    """Build a phpcs ``--report=json`` document from ``{path: [message, ...]}``."""

    def _build(files: Mapping[str, Sequence[Mapping[str, object]]]) -> str:
        payload = {
            "totals": {"errors": sum(len(messages) for messages in files.values()), "warnings": 0, "fixable": 0},
            "files": {
                path: {"errors": len(messages), "warnings": 0, "messages": [dict(message) for message in messages]}
                for path, messages in files.items()
            },
        }
        return json.dumps(payload)

    return _build


def phpcs_message(source: str = "Squiz.Arrays.ArrayDeclaration.NoComma", line: int = 5, **extra: object) -> dict:
    message: dict[str, object] = {
        "message": "Comma required after last value in array declaration",
        "source": source,
        "severity": 5,
        "fixable": True,
        "type": "ERROR",
        "line": line,
        "column": 9,
    }
    message.update(extra)
    return message


@pytest.fixture
def message() -> Callable[..., dict]:
    return phpcs_message
