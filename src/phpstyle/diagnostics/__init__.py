# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Diagnostics package exposing normalisation, baseline and exclusion helpers."""

from __future__ import annotations

from .baseline import (
    BaselineFilter,
    BaselineRecorder,
    InMemoryBaseline,
    PassthroughBaselineFilter,
    RecordResult,
    SarbBaselineFilter,
)
from .exclusion import PathExclusionPolicy
from .normalize import DiagnosticNormalizer, strip_prefixes

__all__ = (
    "BaselineFilter",
    "BaselineRecorder",
    "DiagnosticNormalizer",
    "InMemoryBaseline",
    "PassthroughBaselineFilter",
    "PathExclusionPolicy",
    "RecordResult",
    "SarbBaselineFilter",
    "strip_prefixes",
)
