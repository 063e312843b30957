# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Reporting helpers for rendering style-check results."""

from __future__ import annotations

from .links import LinkedText, RuleLinkTable, ellipsize, make_path_link
from .presenter import ResultPresenter, describe_changeset, exit_status_for

__all__ = [
    "LinkedText",
    "ResultPresenter",
    "RuleLinkTable",
    "describe_changeset",
    "ellipsize",
    "exit_status_for",
    "make_path_link",
]
