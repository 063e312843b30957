# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Process execution helpers."""

from __future__ import annotations

from .process import (
    PHP_TOOL_ENV,
    CommandOptions,
    CommandRunner,
    SubprocessExecutionError,
    run_command,
    tool_environment,
)

__all__ = [
    "CommandOptions",
    "CommandRunner",
    "PHP_TOOL_ENV",
    "SubprocessExecutionError",
    "run_command",
    "tool_environment",
]
