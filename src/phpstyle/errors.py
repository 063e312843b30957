# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the style pipeline."""

from __future__ import annotations

import shlex
from collections.abc import Sequence


class PhpStyleError(RuntimeError):
    """Base class for fatal errors raised by the style pipeline."""


class ConfigError(PhpStyleError):
    """Raised when configuration input is invalid."""


class ChangeSetResolutionError(PhpStyleError):
    """Raised when the set of files to scan cannot be determined."""


class ToolInvocationError(PhpStyleError):
    """Raised when an external tool produced no usable output."""

    def __init__(self, message: str, *, command: Sequence[str] | str) -> None:
        """Initialise the error with the command that was executed.

        Args:
            message: Human-readable description of the failure.
            command: Exact command (argv or shell-style string) that ran.
        """

        super().__init__(message)
        self.command = command if isinstance(command, str) else shlex.join(command)


class DiagnosticParseError(PhpStyleError):
    """Raised when tool output is not the JSON document we expect."""


class FixTargetError(PhpStyleError):
    """Raised when the fix target does not exist."""


__all__ = [
    "ChangeSetResolutionError",
    "ConfigError",
    "DiagnosticParseError",
    "FixTargetError",
    "PhpStyleError",
    "ToolInvocationError",
]
