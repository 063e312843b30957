# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""PHP runtime helpers shared by the engine wrappers."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from ..core.runtime.process import CommandOptions, CommandRunner, SubprocessExecutionError, run_command
from ..errors import ToolInvocationError

PHP_EXECUTABLE: Final[str] = "php"
#: ``E_ERROR | E_PARSE``: the tools themselves emit deprecations on newer PHP.
LENIENT_ERROR_REPORTING: Final[int] = 5
LENIENT_PHP_RUNTIME: Final[tuple[str, ...]] = (
    PHP_EXECUTABLE,
    "-d",
    "memory_limit=-1",
    "-d",
    f"error_reporting={LENIENT_ERROR_REPORTING}",
)
_VERSION_SNIPPET: Final[str] = 'echo PHP_MAJOR_VERSION . "." . PHP_MINOR_VERSION;'


def detect_php_version(root: Path, runner: CommandRunner = run_command) -> str:
    """Return the ``MAJOR.MINOR`` version of the ``php`` interpreter on ``PATH``.

    Raises:
        ToolInvocationError: If the interpreter cannot be executed.
    """

    command = [PHP_EXECUTABLE, "-r", _VERSION_SNIPPET]
    try:
        completed = runner(command, CommandOptions(cwd=root, check=True))
    except (SubprocessExecutionError, FileNotFoundError) as exc:
        raise ToolInvocationError(f"Unable to determine the PHP version: {exc}", command=command) from exc
    version = (completed.stdout or "").strip()
    if not version:
        raise ToolInvocationError("No output received from php while detecting its version", command=command)
    return version


__all__ = ["LENIENT_PHP_RUNTIME", "PHP_EXECUTABLE", "detect_php_version"]
