# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Baseline filtering and recording.

The fingerprint that decides whether a finding matches a baseline entry is
owned by SARB and used as a black box. :class:`InMemoryBaseline` uses an
exact ``(file, source, line)`` key and exists so pipeline behaviour can be
exercised without PHP installed.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from ..core.runtime.process import CommandOptions, CommandRunner, run_command, tool_environment
from ..engine.php import LENIENT_PHP_RUNTIME
from ..errors import ToolInvocationError
from ..models import BaselineEntry, Diagnostic
from .normalize import DiagnosticNormalizer

LOGGER = logging.getLogger(__name__)

SARB_BINARY: Final[str] = "./vendor/bin/sarb"
SARB_INPUT_FORMAT: Final[str] = "phpcodesniffer-json"


@dataclass(frozen=True, slots=True)
class RecordResult:
    """Outcome of writing a baseline snapshot."""

    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@runtime_checkable
class BaselineFilter(Protocol):
    """Turn raw phpcs output into diagnostics absent from the baseline."""

    def filter(self, raw_output: str) -> list[Diagnostic]:
        """Return the diagnostics in ``raw_output`` that are not baselined."""


@runtime_checkable
class BaselineRecorder(Protocol):
    """Replace the baseline snapshot with every finding in ``raw_output``."""

    def record(self, raw_output: str) -> RecordResult:
        """Persist ``raw_output`` as the new baseline."""


class PassthroughBaselineFilter(BaselineFilter):
    """Bypass baseline matching and report every finding."""

    def __init__(self, normalizer: DiagnosticNormalizer) -> None:
        self._normalizer = normalizer

    def filter(self, raw_output: str) -> list[Diagnostic]:
        return self._normalizer.parse(raw_output, ignore_baseline=True)


class SarbBaselineFilter(BaselineFilter, BaselineRecorder):
    """Delegate baseline matching and creation to the SARB subprocess."""

    def __init__(
        self,
        root: Path,
        baseline_path: Path,
        normalizer: DiagnosticNormalizer,
        *,
        runner: CommandRunner = run_command,
    ) -> None:
        """Create a SARB-backed baseline.

        Args:
            root: Project root; SARB runs from here.
            baseline_path: Snapshot file read by ``remove`` and written by ``create``.
            normalizer: Normaliser for the SARB JSON report.
            runner: Command runner used to execute SARB.
        """

        self._root = root
        self._baseline_path = baseline_path
        self._normalizer = normalizer
        self._runner = runner

    @property
    def baseline_path(self) -> Path:
        return self._baseline_path

    def remove_command(self) -> list[str]:
        return [*LENIENT_PHP_RUNTIME, SARB_BINARY, "--output-format=json", "remove", str(self._baseline_path)]

    def create_command(self) -> list[str]:
        return [*LENIENT_PHP_RUNTIME, SARB_BINARY, "create", f"--input-format={SARB_INPUT_FORMAT}", str(self._baseline_path)]

    def filter(self, raw_output: str) -> list[Diagnostic]:
        """Pipe ``raw_output`` through ``sarb remove`` and normalise the result.

        Raises:
            ToolInvocationError: If SARB printed nothing on stdout.
            DiagnosticParseError: If SARB's output is not the expected JSON.
        """

        command = self.remove_command()
        LOGGER.debug("running baseline filter command=%s", " ".join(command))
        completed = self._runner(command, self._options(raw_output))
        if not (completed.stdout or "").strip():
            detail = (completed.stderr or "").strip()
            message = "No output received from sarb"
            raise ToolInvocationError(f"{message}: {detail}" if detail else message, command=command)
        return self._normalizer.parse(completed.stdout, ignore_baseline=False)

    def record(self, raw_output: str) -> RecordResult:
        command = self.create_command()
        LOGGER.debug("running baseline create command=%s", " ".join(command))
        completed = self._runner(command, self._options(raw_output))
        output = "".join(part for part in (completed.stdout, completed.stderr) if part)
        return RecordResult(returncode=completed.returncode, output=output)

    def _options(self, payload: str) -> CommandOptions:
        # SARB exits non-zero whenever findings remain; that is not a failure.
        return CommandOptions(cwd=self._root, env=tool_environment(), check=False, input=payload)


class InMemoryBaseline(BaselineFilter, BaselineRecorder):
    """Baseline held in memory and keyed by :class:`BaselineEntry`."""

    def __init__(self, normalizer: DiagnosticNormalizer, entries: Iterable[BaselineEntry] = ()) -> None:
        self._normalizer = normalizer
        self._entries: frozenset[BaselineEntry] = frozenset(entries)

    @property
    def entries(self) -> frozenset[BaselineEntry]:
        return self._entries

    def filter(self, raw_output: str) -> list[Diagnostic]:
        diagnostics = self._normalizer.parse(raw_output, ignore_baseline=True)
        return [diagnostic for diagnostic in diagnostics if BaselineEntry.from_diagnostic(diagnostic) not in self._entries]

    def record(self, raw_output: str) -> RecordResult:
        diagnostics = self._normalizer.parse(raw_output, ignore_baseline=True)
        self._entries = frozenset(BaselineEntry.from_diagnostic(diagnostic) for diagnostic in diagnostics)
        return RecordResult(returncode=0, output=f"Baseline created with {len(self._entries)} entries")

    def snapshot(self) -> str:
        """Return a canonical JSON rendering of the recorded entries."""

        ordered = sorted(self._entries, key=lambda entry: (entry.file, entry.line, entry.source))
        return json.dumps([asdict(entry) for entry in ordered], indent=2, sort_keys=True)


__all__ = [
    "BaselineFilter",
    "BaselineRecorder",
    "InMemoryBaseline",
    "PassthroughBaselineFilter",
    "RecordResult",
    "SarbBaselineFilter",
]
