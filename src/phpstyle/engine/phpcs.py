# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Invoke PHP_CodeSniffer and capture its JSON report."""

from __future__ import annotations

import logging
import shlex
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ..config import StyleConfig
from ..core.runtime.process import CommandOptions, CommandRunner, run_command, tool_environment
from ..errors import ToolInvocationError
from ..models import ChangeSet, ScanMode
from .php import LENIENT_PHP_RUNTIME, detect_php_version

LOGGER = logging.getLogger(__name__)

PHPCS_BINARY: Final[str] = "vendor/bin/phpcs"
FILE_LIST_PREFIX: Final[str] = "phpcs_file_list_"


@dataclass(frozen=True, slots=True)
class LintReport:
    """Complete output of one finished phpcs invocation."""

    command: tuple[str, ...]
    stdout: str
    stderr: str = ""
    returncode: int = 0

    @property
    def command_line(self) -> str:
        return shlex.join(self.command)


def collapse_repeated_lines(text: str) -> str:
    """Drop lines identical to the line before them, like ``uniq``.

    Parallel phpcs workers can repeat report lines; the report stays valid
    JSON once adjacent duplicates are removed.
    """

    collapsed: list[str] = []
    previous: str | None = None
    for line in text.splitlines(keepends=True):
        if line == previous:
            continue
        collapsed.append(line)
        previous = line
    return "".join(collapsed)


class PhpcsEngine:
    """Build and run the phpcs command for a change set."""

    def __init__(self, root: Path, config: StyleConfig, *, runner: CommandRunner = run_command) -> None:
        """Bind the engine to a project root.

        Args:
            root: Project root; phpcs runs from here.
            config: Active configuration (standard, extension, workers).
            runner: Command runner used to execute phpcs.
        """

        self._root = root
        self._config = config
        self._runner = runner
        self._php_version = config.php_version

    @property
    def php_version(self) -> str:
        if self._php_version is None:
            self._php_version = detect_php_version(self._root, self._runner)
        return self._php_version

    def build_command(self, targets: Sequence[str], *, parallel: int) -> list[str]:
        """Return the argv for scanning ``targets`` with ``parallel`` workers."""

        return [
            *LENIENT_PHP_RUNTIME,
            PHPCS_BINARY,
            "--runtime-set",
            "testVersion",
            self.php_version,
            f"--extensions={self._config.extension}",
            f"--parallel={parallel}",
            f"--standard={self._config.standard}",
            "--report=json",
            *targets,
        ]

    def scan(self, changeset: ChangeSet) -> LintReport:
        """Scan the paths in ``changeset``.

        Whitelist mode passes directories on the command line; every other mode
        writes a temporary ``--file-list`` that is removed afterwards.

        Raises:
            ToolInvocationError: If phpcs printed nothing on stdout.
        """

        if changeset.mode is ScanMode.WHITELIST:
            return self._run(self.build_command(changeset.paths, parallel=self._config.parallel))
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            prefix=FILE_LIST_PREFIX,
            suffix=".txt",
            delete=False,
        ) as handle:
            handle.write("\n".join(changeset.paths))
            file_list = Path(handle.name)
        try:
            return self._run(self.build_command([f"--file-list={file_list}"], parallel=self._config.parallel))
        finally:
            file_list.unlink(missing_ok=True)

    def scan_directories(self, directories: Sequence[str]) -> LintReport:
        """Scan whole directories with the baseline worker count."""

        return self._run(self.build_command(directories, parallel=self._config.baseline_parallel))

    def _run(self, command: list[str]) -> LintReport:
        LOGGER.debug("running lint engine command=%s", shlex.join(command))
        completed = self._runner(command, CommandOptions(cwd=self._root, env=tool_environment(), check=False))
        stdout = collapse_repeated_lines(completed.stdout or "")
        if not stdout.strip():
            raise ToolInvocationError("No output received from phpcs", command=command)
        return LintReport(
            command=tuple(command),
            stdout=stdout,
            stderr=completed.stderr or "",
            returncode=completed.returncode,
        )


__all__ = ["LintReport", "PhpcsEngine", "collapse_repeated_lines"]
