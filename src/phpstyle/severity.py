# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Severity levels reported by the lint engine."""

    ERROR = "error"
    WARNING = "warning"

    @classmethod
    def from_raw(cls, value: object, default: Severity | None = None) -> Severity:
        """Coerce a tool-native severity token into :class:`Severity`.

        phpcs reports ``"ERROR"``/``"WARNING"`` in its ``type`` field while SARB
        lower-cases the same vocabulary. Numeric phpcs weights carry no
        category and fall back to ``default``.

        Args:
            value: Raw token supplied by the producing tool.
            default: Severity returned when ``value`` is not recognised.

        Returns:
            Severity: Normalised severity level.
        """

        fallback = default if default is not None else cls.ERROR
        if isinstance(value, Severity):
            return value
        if not isinstance(value, str):
            return fallback
        try:
            return cls(value.strip().lower())
        except ValueError:
            return fallback


__all__ = ["Severity"]
