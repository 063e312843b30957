# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import os
import shutil

# Bandit: subprocess usage is intentional; we provide a controlled wrapper around
# external tool execution, normalising arguments and disabling ``shell=True``.
import subprocess  # nosec B404 suppression_valid: Shell-free subprocess wrapper enforces safe execution.
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

#: Environment toggles applied to every PHP tool invocation.
PHP_TOOL_ENV: Final[Mapping[str, str]] = {"XDEBUG_MODE": "off"}


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Immutable command execution options."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    check: bool = True
    capture_output: bool = True
    text: bool = True
    input: str | None = None

    def with_input(self, payload: str | None) -> CommandOptions:
        """Return a copy of the options feeding ``payload`` to stdin.

        Args:
            payload: Text written to the subprocess standard input.

        Returns:
            CommandOptions: Updated options instance.
        """

        return replace(self, input=payload)


CommandRunner = Callable[[Sequence[str], CommandOptions], CompletedProcess[str]]


class SubprocessExecutionError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        """Initialise the error with captured subprocess metadata.

        Args:
            command: Normalised command sequence that was executed.
            returncode: Exit status reported by the subprocess.
            stdout: Captured standard output stream.
            stderr: Captured standard error stream.
        """
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def tool_environment(extra: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return a fresh copy of ``os.environ`` with PHP tool toggles applied.

    Args:
        extra: Additional variables layered on top of :data:`PHP_TOOL_ENV`.

    Returns:
        dict[str, str]: Environment mapping safe to hand to a subprocess.
    """

    env = dict(os.environ)
    env.update(PHP_TOOL_ENV)
    if extra:
        env.update(extra)
    return env


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Normalise the subprocess argument sequence.

    Args:
        args: Raw command arguments supplied by the caller.

    Returns:
        list[str]: Validated argument list suitable for subprocess execution.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(args: Sequence[str], options: CommandOptions | None = None) -> CompletedProcess[str]:
    """Execute ``args`` after normalising the executable path.

    The call blocks until the process terminates; output is only available
    once the process has exited.

    Args:
        args: Command and argument sequence to execute.
        options: Options configuring execution semantics.

    Returns:
        CompletedProcess: Subprocess execution metadata.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
        SubprocessExecutionError: When ``check`` is true and the process exits
            with a non-zero status.
    """

    normalized = _normalize_args(args)
    resolved_options = options or CommandOptions()

    # Bandit: commands are assembled from fixed tool paths; we pass argument
    # lists directly without shell expansion.
    completed: CompletedProcess[str] = subprocess.run(  # nosec B603 - controlled arguments, not user supplied
        normalized,
        cwd=str(resolved_options.cwd) if resolved_options.cwd is not None else None,
        env=dict(resolved_options.env) if resolved_options.env is not None else None,
        check=False,
        capture_output=resolved_options.capture_output,
        text=resolved_options.text,
        input=resolved_options.input,
    )

    if resolved_options.check and completed.returncode != 0:
        raise SubprocessExecutionError(
            normalized,
            completed.returncode,
            completed.stdout if isinstance(completed.stdout, str) else None,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )

    return completed


__all__ = [
    "CommandOptions",
    "CommandRunner",
    "PHP_TOOL_ENV",
    "SubprocessExecutionError",
    "run_command",
    "tool_environment",
]
