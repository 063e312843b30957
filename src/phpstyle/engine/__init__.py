# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Wrappers around the external PHP style tools."""

from __future__ import annotations

from .fixers import FixCommand, FixOutcome, FixRunner, summarize_failures
from .php import LENIENT_PHP_RUNTIME, detect_php_version
from .phpcs import LintReport, PhpcsEngine, collapse_repeated_lines

__all__ = [
    "FixCommand",
    "FixOutcome",
    "FixRunner",
    "LENIENT_PHP_RUNTIME",
    "LintReport",
    "PhpcsEngine",
    "collapse_repeated_lines",
    "detect_php_version",
    "summarize_failures",
]
